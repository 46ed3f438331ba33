"""
High-level use cases for tagclear.

Services orchestrate the repository to run the demo flow and format its
console listing; scripts call these instead of touching sessions directly.
"""
