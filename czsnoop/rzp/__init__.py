"""
Trade Licensing Register (RZP) client.

- client: session-bound JSON/XML client
- xml_records: parsing of directory records and statements
"""

from czsnoop.rzp.client import RzpClient, create_client

__all__ = ["RzpClient", "create_client"]
