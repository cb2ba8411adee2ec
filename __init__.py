"""
ERP_Ops - ERP Document Operations Package

A toolkit for driving a remote document-oriented ERP backend (Frappe/ERPNext
style REST resource API) from Python. It provides a pluggable document
gateway, typed configuration, and a bulk transaction executor that runs an
ordered list of create/update/delete/submit/cancel operations either
best-effort or all-or-nothing with compensating deletes.
"""

__version__ = "0.1.0"
__author__ = "RhythmX"
