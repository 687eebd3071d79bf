import os
from typing import Dict, Optional

import numpy as np
import pandas as pd

SPECIES = [
    ("AB", "Amphispiza", "bilineata", "Bird"),
    ("AH", "Ammospermophilus", "harrisi", "Rodent"),
    ("BA", "Baiomys", "taylori", "Rodent"),
    ("CB", "Campylorhynchus", "brunneicapillus", "Bird"),
    ("DM", "Dipodomys", "merriami", "Rodent"),
    ("DO", "Dipodomys", "ordii", "Rodent"),
    ("DS", "Dipodomys", "spectabilis", "Rodent"),
    ("NL", "Neotoma", "albigula", "Rodent"),
    ("OL", "Onychomys", "leucogaster", "Rodent"),
    ("PE", "Peromyscus", "eremicus", "Rodent"),
    ("PP", "Chaetodipus", "penicillatus", "Rodent"),
    ("RM", "Reithrodontomys", "megalotis", "Rodent"),
    ("SH", "Sigmodon", "hispidus", "Rodent"),
    ("CU", "Cnemidophorus", "uniparens", "Reptile"),
    ("SS", "Spermophilus", "spilosoma", "Rodent"),
    ("SB", "Spizella", "breweri", "Bird"),
    ("UR", "Rodent", "sp.", "Rodent"),
    ("ZL", "Zonotrichia", "leucophrys", "Bird"),
]

PLOT_TYPES = [
    "Control",
    "Long-term Krat Exclosure",
    "Short-term Krat Exclosure",
    "Rodent Exclosure",
    "Spectab exclosure",
]
NUM_PLOTS = 24
MISSING_RATE = 0.1


def generate_species() -> pd.DataFrame:
    return pd.DataFrame(SPECIES, columns=["species_id", "genus", "species", "taxa"])


def generate_plots(num_plots: int = NUM_PLOTS) -> pd.DataFrame:
    plot_ids = np.arange(1, num_plots + 1)
    plot_types = [PLOT_TYPES[i % len(PLOT_TYPES)] for i in range(num_plots)]
    return pd.DataFrame({"plot_id": plot_ids, "plot_type": plot_types})


def generate_surveys(num_records: int, species: pd.DataFrame, plots: pd.DataFrame,
                     seed: Optional[int] = None) -> pd.DataFrame:
    """
    Generate survey records that reference the given species and plots.

    About one record in ten is missing sex and both measurements, like
    animals that escaped before being weighed.
    """
    rng = np.random.default_rng(seed)
    records = pd.DataFrame({
        "record_id": np.arange(1, num_records + 1),
        "month": rng.integers(1, 13, num_records),
        "day": rng.integers(1, 29, num_records),
        "year": rng.integers(1977, 2003, num_records),
        "plot_id": rng.choice(plots["plot_id"].to_numpy(), num_records),
        "species_id": rng.choice(species["species_id"].to_numpy(), num_records),
        "sex": rng.choice(["M", "F"], num_records).astype(object),
        "hindfoot_length": rng.integers(10, 60, num_records).astype(float),
        "weight": rng.integers(4, 280, num_records).astype(float),
    })
    missing = rng.random(num_records) < MISSING_RATE
    records.loc[missing, ["sex", "hindfoot_length", "weight"]] = np.nan
    return records


def write_sample_data(output_dir: str, num_records: int = 1000,
                      seed: Optional[int] = None) -> Dict[str, str]:
    """Write species.csv, plots.csv and surveys.csv; return their paths by table."""
    os.makedirs(output_dir, exist_ok=True)
    species = generate_species()
    plots = generate_plots()
    surveys = generate_surveys(num_records, species, plots, seed=seed)

    paths = {}
    for table, df in (("species", species), ("plots", plots), ("surveys", surveys)):
        path = os.path.join(output_dir, f"{table}.csv")
        df.to_csv(path, index=False)
        paths[table] = path
    return paths


if __name__ == "__main__":
    BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__)))
    output_dir = os.path.join(BASE_DIR, "data", "sample")
    paths = write_sample_data(output_dir, 1000)
    for table, path in paths.items():
        print(f"Generated {table} CSV file at: {path}")
