"""Data layer - load and store sample tables."""

from .storage import data_exists, get_data_path, load_samples, save_samples
