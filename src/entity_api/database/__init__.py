"""Database pools and schema management"""
