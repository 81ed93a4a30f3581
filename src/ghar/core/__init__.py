"""Core runner supervision.

This module contains the lifecycle state machine for the supervised runner
and the on-disk record it is derived from.
"""
