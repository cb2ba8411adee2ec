"""
Bulk Transaction Example

Demonstrates running the same batch in best-effort and all-or-nothing mode
against a live ERP site. Connection details are read from the environment
(ERPNEXT_BASE_URL, ERPNEXT_API_KEY, ERPNEXT_API_SECRET) or from the YAML
file given as the first argument.
"""

import sys
import os
import asyncio

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from client import ErpClient
from config import load_settings
from bulk_operations import BatchValidationError
from utils import configure_logging
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
print_report = example_utils.print_report


def build_operations(suffix: str):
    """Two ToDo creations followed by an update that the backend rejects."""
    return [
        {"type": "create", "doctype": "ToDo", "doc": {"description": f"Bulk example A {suffix}"}},
        {"type": "create", "doctype": "ToDo", "doc": {"description": f"Bulk example B {suffix}"}},
        {"type": "update", "doctype": "ToDo", "name": f"does-not-exist-{suffix}",
         "patch": {"status": "Closed"}},
    ]


async def main():
    """Main function to demonstrate bulk transactions."""
    print_section("ERP Bulk Transaction Example")

    # Step 1: Initialize Client
    print_step(1, "Initialize Client")
    try:
        config = load_settings(sys.argv[1] if len(sys.argv) > 1 else None)
        configure_logging(config.logging)
        print_info("Base URL", config.connection.base_url)
        print_info("Max operations", config.bulk.max_operations)
        client = ErpClient(config)
        print_success("Client initialized")
    except Exception as e:
        print_error(f"Failed to initialize: {e}")
        return

    async with client:
        # Step 2: Best-effort run
        print_step(2, "Run Batch in Best-Effort Mode")
        try:
            report = await client.bulk.run_batch(build_operations("best-effort"), rollback_on_failure=False)
            print_report(report)
            print_info("Note", "The created ToDo documents remain on the site")
        except BatchValidationError as e:
            print_error(f"Batch rejected: {e}")

        # Step 3: All-or-nothing run
        print_step(3, "Run Batch in All-or-Nothing Mode")
        try:
            report = await client.bulk.run_batch(build_operations("rollback"), rollback_on_failure=True)
            print_report(report)
            if report.rolled_back:
                print_success("Documents created by this batch were deleted again")
        except BatchValidationError as e:
            print_error(f"Batch rejected: {e}")

        # Step 4: Timing
        print_step(4, "Timing Summary")
        summary = client.bulk.get_timing_summary()
        if summary:
            print_info("Runs", summary.total_runs)
            print_info("Average", f"{summary.average_execution_time*1000:.2f}ms")

    print_section("Example Completed")


if __name__ == "__main__":
    asyncio.run(main())
