"""Shared pytest configuration for City Venture pricing tests."""
import sys
sys.dont_write_bytecode = True
