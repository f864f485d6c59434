"""Print the sheets and first rows of the latest downloaded school report.

Usage: python scripts/inspect_report.py [download_dir]
"""
import glob
import os
import sys

from openpyxl import load_workbook

from schoolwise.config.directory_config import DOWNLOADS_DIR

download_dir = sys.argv[1] if len(sys.argv) > 1 else os.environ.get('SCHOOLWISE_DOWNLOAD_DIR', str(DOWNLOADS_DIR))
files = glob.glob(os.path.join(download_dir, '*_school_report*.xlsx'))
files += glob.glob(os.path.join(download_dir, '*_negative_comments_report*.xlsx'))
if not files:
    print('No matching report files found in', download_dir)
    raise SystemExit(1)

latest = max(files, key=os.path.getmtime)
print('Latest report:', latest)
wb = load_workbook(latest, read_only=True)
print('Sheets:', wb.sheetnames)

for sheet_name in wb.sheetnames:
    print('\n--- Sheet:', sheet_name, '---')
    ws = wb[sheet_name]
    for r, row in enumerate(ws.iter_rows(max_row=10, max_col=15, values_only=True), start=1):
        print(r, list(row))

print('\nDone')
