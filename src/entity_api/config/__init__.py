"""Settings and permission tables"""
