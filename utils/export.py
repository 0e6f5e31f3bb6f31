"""
CSV Export Utility

Renders everything a user has recorded as one sectioned CSV document.
"""

import csv
import io
import logging

from .date_converter import format_display_date

logger = logging.getLogger(__name__)


def _display_date(value):
    try:
        return format_display_date(value)
    except ValueError:
        return value or ""


def export_to_csv(data):
    """
    Build a CSV document with one section per data type.

    Args:
        data (dict): Keys bloodPressure, heartRate, weight, sleep,
            appointments and medications, each a list of records

    Returns:
        str: CSV text; sections are separated by a blank line
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')

    sections = [
        ("Blood Pressure Data", ["Date", "Systolic", "Diastolic", "Notes"], data.get('bloodPressure'),
         lambda r: [_display_date(r.get('date')), r.get('systolic'), r.get('diastolic'), r.get('notes', '')]),
        ("Heart Rate Data", ["Date", "Value (BPM)", "Notes"], data.get('heartRate'),
         lambda r: [_display_date(r.get('date')), r.get('value'), r.get('notes', '')]),
        ("Weight Data", ["Date", "Value (kg)", "Notes"], data.get('weight'),
         lambda r: [_display_date(r.get('date')), r.get('value'), r.get('notes', '')]),
        ("Sleep Data", ["Date", "Hours", "Quality", "Notes"], data.get('sleep'),
         lambda r: [_display_date(r.get('date')), r.get('hours'), r.get('quality') or 'N/A', r.get('notes', '')]),
        ("Appointments", ["Date", "Title", "Doctor", "Location", "Completed", "Notes"], data.get('appointments'),
         lambda r: [_display_date(r.get('date')), r.get('title'), r.get('doctorName', ''), r.get('location', ''),
                    'Yes' if r.get('completed') else 'No', r.get('notes', '')]),
        ("Medications", ["Name", "Dosage", "Frequency", "Start Date", "End Date", "Instructions"], data.get('medications'),
         lambda r: [r.get('name'), r.get('dosage'), r.get('frequency'),
                    _display_date(r.get('startDate')) if r.get('startDate') else 'N/A',
                    _display_date(r.get('endDate')) if r.get('endDate') else 'Ongoing',
                    r.get('instructions', '')]),
    ]

    written = 0
    for title, header, rows, to_row in sections:
        if not rows:
            continue
        if written:
            writer.writerow([])
        writer.writerow([title])
        writer.writerow(header)
        for row in rows:
            writer.writerow(to_row(row))
        written += 1

    logger.info(f"Exported {written} data sections to CSV")
    return buffer.getvalue()
