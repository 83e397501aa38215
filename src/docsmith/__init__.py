"""docsmith - template-based document generation.

Renders business documents (invoices, cash orders, contracts) from Jinja2
templates and composes one or many of them into a single file:

- doc: HTML saved as .doc for word processors
- pdf: converted by an HTML to PDF renderer (WeasyPrint by default)
- print: a page that opens the browser print dialog
"""

__version__ = "0.1.0"
__author__ = "docsmith Contributors"
