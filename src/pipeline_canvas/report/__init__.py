"""Relatórios derivados do CompileManifest."""

from .compile_report import generate_compile_report, write_compile_report

__all__ = ["generate_compile_report", "write_compile_report"]
