"""Readers that turn raw import files into parsed rows."""

from billing_records.readers.csv_parser import CSVRow, ParsedCSV, SkippedRow, parse_csv

__all__ = ["CSVRow", "ParsedCSV", "SkippedRow", "parse_csv"]
