"""
Food search proxy and local availability checks.
"""
