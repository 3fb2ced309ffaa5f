"""PDF inspection for uploaded or linked book files"""

from bindery.analysis.pdf_analyzer import PdfAnalysis, analyze_pdf_base64, analyze_pdf_bytes, analyze_pdf_url, fetch_pdf

__all__ = ["PdfAnalysis", "analyze_pdf_bytes", "analyze_pdf_base64", "analyze_pdf_url", "fetch_pdf"]
