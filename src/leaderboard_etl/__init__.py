"""Leaderboard ingestion pipeline: spreadsheet CSV export -> ranked dataset."""
