"""Disk detection, partitioning, formatting and mounting for the target system."""