"""
HTTP API for Pro Sites billing
"""
