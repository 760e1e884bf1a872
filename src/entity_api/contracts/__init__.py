"""Entity metadata contracts"""
