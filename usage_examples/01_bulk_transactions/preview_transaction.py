"""
Transaction Preview Example

Demonstrates validating a document on the ERP site without saving it.
"""

import sys
import os
import asyncio

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from client import ErpClient
from config import load_settings
from document_gateway import DocumentGatewayError
# Import usage_examples utils (not the project's utils package)
import importlib.util
utils_file_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'utils.py'))
spec = importlib.util.spec_from_file_location("example_utils", utils_file_path)
example_utils = importlib.util.module_from_spec(spec)
spec.loader.exec_module(example_utils)
print_section = example_utils.print_section
print_step = example_utils.print_step
print_success = example_utils.print_success
print_info = example_utils.print_info
print_error = example_utils.print_error
print_warning = example_utils.print_warning


async def main():
    """Main function to demonstrate transaction previews."""
    print_section("ERP Transaction Preview Example")

    print_step(1, "Initialize Client")
    try:
        client = ErpClient(load_settings())
        print_success("Client initialized")
    except Exception as e:
        print_error(f"Failed to initialize: {e}")
        return

    async with client:
        print_step(2, "Preview a Sales Invoice")
        document = {
            "customer": "Walk-In Customer",
            "grand_total": 1250.0,
            "items": [{"item_code": "WIDGET-01", "qty": 5, "rate": 250.0}],
        }
        try:
            preview = await client.bulk.preview_transaction("Sales Invoice", document)
        except DocumentGatewayError as e:
            print_error(f"Preview failed ({e.kind.value}): {e}")
            return

        print_info("Valid", preview.valid)
        for issue in preview.errors:
            print_error(f"{issue.field or '-'}: {issue.message}")
        for warning in preview.warnings:
            print_warning(warning)
        if preview.estimated_impact:
            print_info("Financial impact", preview.estimated_impact.financial_impact)

    print_section("Example Completed")


if __name__ == "__main__":
    asyncio.run(main())
