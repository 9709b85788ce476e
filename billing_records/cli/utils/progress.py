"""Progress tracking utilities for CLI."""

from typing import List, Optional

import click


class ProgressTracker:
    """Track progress through the stages of a command.

    Attributes:
        stages: List of stage names
        total_stages: Total number of stages
        current_stage: Current stage index (0-based)

    Example:
        tracker = ProgressTracker(["Loading records", "Writing CSV"])
        click.echo(format_info(tracker.get_current_message()))
        tracker.advance("Loaded 12 record(s)")
    """

    def __init__(self, stages: List[str]):
        self.stages = stages
        self.total_stages = len(stages)
        self.current_stage = 0

    def advance(self, message: Optional[str] = None):
        """Advance to the next stage, echoing ``message`` if given."""
        if message:
            click.echo(f"  {message}")
        self.current_stage += 1

    def get_current_message(self) -> str:
        """Get the current stage prefixed with ``[n/total]``."""
        if self.current_stage < self.total_stages:
            stage_name = self.stages[self.current_stage]
            return f"[{self.current_stage + 1}/{self.total_stages}] {stage_name}"
        return f"[{self.total_stages}/{self.total_stages}] Complete"

    def is_complete(self) -> bool:
        return self.current_stage >= self.total_stages


def create_progress_bar(length: int, label: str = "Importing rows"):
    """Create a Click progress bar for a known number of rows.

    Args:
        length: Total number of rows to process
        label: Label to display with the progress bar

    Returns:
        Click progress bar context manager
    """
    return click.progressbar(length=length, label=label, show_pos=True)
