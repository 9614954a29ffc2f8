"""
export.py - CSV export of a user's transactions.
"""

import csv
import io

CSV_HEADER = ["ID", "Tipo", "Descrição", "Valor", "Categoria", "Data"]
EXPORT_FILENAME = "controle_financeiro_export.csv"


def _date_only(value):
    return str(value).split('T')[0][:10]


def transactions_to_csv(transactions):
    """Render transactions as CSV text, quoting descriptions only when needed."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_HEADER)
    for t in transactions:
        writer.writerow([t['id'], t['type'], t['description'], t['amount'], t['category'], _date_only(t['date'])])
    return buffer.getvalue()


def write_csv(path, transactions):
    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(transactions_to_csv(transactions))
    return path
