"""Utility modules: errors, markup text helpers, geometry, logging, paths and config"""
