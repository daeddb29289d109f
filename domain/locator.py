"""Locator code generation"""
import random

LOCATOR_MIN = 1000
LOCATOR_MAX = 9999


def generate_locator() -> str:
    """Short numeric code a customer can quote by phone (not unique, not secret)"""
    return str(random.randint(LOCATOR_MIN, LOCATOR_MAX))
