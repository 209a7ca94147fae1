"""
Payload Validator - Declarative validation of request payloads

This package provides tools for:
- Checking payload values against a closed set of field types
- Validating nested payloads against schemas and reporting every violation
- Loading schema definitions from YAML or JSON files
"""

__version__ = "0.1.0"
