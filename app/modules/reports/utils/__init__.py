"""
Utilities for Reports module

Exportación CSV de los reportes.
"""

import csv
import io
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List

from fastapi import Response


def create_csv_response(
    data: List[Dict[str, Any]],
    filename: str,
    headers: Dict[str, str] = None
) -> Response:
    """
    Create a CSV response from a list of dictionaries.

    Args:
        data: List of dictionaries with report data
        filename: Name for the CSV file
        headers: Optional mapping of field names to CSV headers
    """
    if not data:
        csv_content = ""
        if headers:
            csv_content = ",".join(headers.values()) + "\n"
    else:
        output = io.StringIO()

        fieldnames = list(headers.keys()) if headers else list(data[0].keys())
        csv_headers = list(headers.values()) if headers else fieldnames

        writer = csv.DictWriter(output, fieldnames=fieldnames, lineterminator="\n")
        writer.writerow(dict(zip(fieldnames, csv_headers)))

        for row in data:
            writer.writerow({key: format_csv_value(value) for key, value in row.items() if key in fieldnames})

        csv_content = output.getvalue()
        output.close()

    return Response(
        content=csv_content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={filename}",
            "Content-Type": "text/csv; charset=utf-8"
        }
    )


def format_csv_value(value: Any) -> str:
    if value is None:
        return ""
    elif isinstance(value, (date, datetime)):
        return value.isoformat()
    elif isinstance(value, bool):
        return "Sí" if value else "No"
    return str(value)


def prepare_sales_totals_csv(report_data: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [{
        "as_of_date": report_data["as_of_date"],
        "today": report_data["today"],
        "week": report_data["week"],
        "month": report_data["month"],
    }]


CSV_HEADERS = {
    "sales_totals": {
        "as_of_date": "Fecha",
        "today": "Ventas Hoy",
        "week": "Ventas Semana",
        "month": "Ventas Mes",
    },
    "best_sellers": {
        "nombre": "Producto",
        "precio": "Precio",
        "total_vendido": "Unidades Vendidas",
    },
    "low_stock": {
        "nombre": "Producto",
        "precio": "Precio",
        "stock": "Stock",
    },
}
