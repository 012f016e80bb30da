"""
Synthetic student data generation.

All functions in this module are pure given the seeds in SyntheticDataConfig (no file I/O).
"""

from domain.synthetic.students import assign_districts, generate_student_dataset, salt_dataset, simulate_district

__all__ = [
    "generate_student_dataset",
    "simulate_district",
    "salt_dataset",
    "assign_districts",
]
