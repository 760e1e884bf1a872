"""Request parameter and response models"""
