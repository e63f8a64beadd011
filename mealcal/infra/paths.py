from pathlib import Path
from mealcal.utilities.config import DATA_DIR

# Centralized paths for data files (single source of truth)
RECIPES_FILE = DATA_DIR / 'recipes.json'
PLAN_FILE = DATA_DIR / 'meal_plan.json'


def data_files(data_dir: Path):
    """Return (recipes_file, plan_file) inside an alternative data directory."""
    data_dir = Path(data_dir)
    return data_dir / RECIPES_FILE.name, data_dir / PLAN_FILE.name


__all__ = ['DATA_DIR', 'RECIPES_FILE', 'PLAN_FILE', 'data_files']
