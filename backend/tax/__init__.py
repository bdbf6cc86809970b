# tax/__init__.py
"""
Tax app - VAT amounts per document line.

Pure calculation (tax.calculator) plus a thin API used by document
editors to recompute a line as it is edited.
"""
