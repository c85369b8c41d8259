"""Attendance Ledger package.

Organized by feature modules (records, requests, users) with a thin Flask
controller layer over service/repository layers. Time records and their
change requests form the ledger; `ledger.policy` holds the pure rules both
sides share.
"""
