"""Loading and validation of recorded accelerometer files."""

import polars as pl
from pathlib import Path
from typing import Iterator, List

from .step_detector import SensorSample


REQUIRED_COLUMNS = ('ax', 'ay', 'az', 'timestamp_ms')
SUPPORTED_SUFFIXES = ('.parquet', '.csv')


class AccelDataLoader:
    """Handles loading and validation of accelerometer recordings."""

    def __init__(self, data_dir: Path):
        """
        Initialize the data loader.

        Args:
            data_dir: Directory containing parquet or CSV recordings
        """
        self.data_dir = Path(data_dir)

    def get_available_recordings(self) -> List[str]:
        """
        List recording names (file stems) found in the data directory.

        Returns:
            Sorted list of recording names
        """
        if not self.data_dir.is_dir():
            return []
        files = sorted(
            f for f in self.data_dir.iterdir()
            if f.suffix in SUPPORTED_SUFFIXES
        )
        return [f.stem for f in files]

    def get_file_path(self, name: str) -> Path:
        """
        Resolve a recording name to its file path.

        Args:
            name: Recording name (stem) or file name

        Returns:
            Path of the first matching file

        Raises:
            FileNotFoundError: If no parquet or CSV file exists for the name
        """
        candidate = self.data_dir / name
        if candidate.suffix in SUPPORTED_SUFFIXES and candidate.exists():
            return candidate
        for suffix in SUPPORTED_SUFFIXES:
            path = self.data_dir / f"{name}{suffix}"
            if path.exists():
                return path
        raise FileNotFoundError(f"Recording not found: {name} (in {self.data_dir})")

    def load_recording(self, name: str) -> pl.DataFrame:
        """
        Load a recording and order it by timestamp.

        Args:
            name: Recording name

        Returns:
            DataFrame with float ax/ay/az columns and an integer timestamp_ms column

        Raises:
            FileNotFoundError: If the recording doesn't exist
            ValueError: If required columns are missing or contain empty cells
        """
        path = self.get_file_path(name)
        if path.suffix == '.parquet':
            df = pl.read_parquet(path)
        else:
            df = pl.read_csv(path)

        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Recording {path.name} is missing columns: {', '.join(missing)}")

        null_counts = df.select(list(REQUIRED_COLUMNS)).null_count().row(0, named=True)
        blank = [c for c in REQUIRED_COLUMNS if null_counts[c] > 0]
        if blank:
            raise ValueError(f"Recording {path.name} has empty cells in columns: {', '.join(blank)}")

        return (
            df.select(
                pl.col('ax').cast(pl.Float64),
                pl.col('ay').cast(pl.Float64),
                pl.col('az').cast(pl.Float64),
                pl.col('timestamp_ms').cast(pl.Int64),
            )
            .sort('timestamp_ms')
        )

    def iter_samples(self, df: pl.DataFrame) -> Iterator[SensorSample]:
        """
        Yield the rows of a loaded recording as samples.

        Args:
            df: DataFrame returned by load_recording

        Yields:
            SensorSample for each row, in timestamp order
        """
        for row in df.iter_rows(named=True):
            yield SensorSample(row['ax'], row['ay'], row['az'], row['timestamp_ms'])
