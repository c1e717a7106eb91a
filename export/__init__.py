"""Export-Modul: Excel (openpyxl) für erzeugte Tagespläne."""

from export.excel_export import ScheduleExporter

__all__ = ["ScheduleExporter"]
