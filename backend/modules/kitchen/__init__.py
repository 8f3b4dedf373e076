# backend/modules/kitchen/__init__.py

"""
Kitchen line: cook roster and dish assignment.
"""
