"""
Lunele Gateway - generic MongoDB CRUD API.
"""
