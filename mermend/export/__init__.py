"""Export subsystem — writes final artifacts to disk."""

from mermend.export.writer import export_filename, export_svg

__all__ = [
    "export_filename",
    "export_svg",
]
