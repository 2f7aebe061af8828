# =============================================================================
# utils/csv_utils.py - CSV utilities
# =============================================================================

import csv
import logging
from typing import Any, Dict, List


class CSVHandler:
    """Utilities for writing CSV files"""

    @staticmethod
    def write_csv(data: List[Dict[str, Any]], output_path: str,
                  fieldnames: List[str]) -> None:
        """Write data to CSV file. An empty data list produces a header-only file."""
        logger = logging.getLogger(__name__)

        if not data:
            logger.warning("No data to write - writing header only")

        try:
            with open(output_path, 'w', newline='', encoding='utf-8') as file:
                writer = csv.DictWriter(file, fieldnames=fieldnames)
                writer.writeheader()
                writer.writerows(data)

            logger.info(f"Successfully wrote {len(data)} records to {output_path}")

        except Exception as e:
            logger.error(f"Error writing CSV: {e}")
            raise
