"""Streamlit user interface for the sheet.

Run with ``streamlit run src/dh_sheet/ui/app.py``.
"""
