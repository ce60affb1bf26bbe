# topic_portal/services/__init__.py
from .export_service import ExportService, ExportFormat, ExportFile
