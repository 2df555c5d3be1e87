"""Complete pyaim workflow with NetCDF output.

This example demonstrates:
1. Loading meteorology and emissions
2. Reading the &AIM run configuration
3. Running the model to steady state
4. Writing the output pollutant fields to NetCDF
"""

import logging
from pathlib import Path

from pyaim.core.engine import TimeIntegrationEngine
from pyaim.data.config_parser import load_config
from pyaim.data.met_reader import NetCDFReader, read_emissions
from pyaim.io import NetCDFWriter


def main():
    """Run complete workflow with output generation."""
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")

    # ========================================================================
    # 1. Load Meteorology and Emissions
    # ========================================================================
    print("Loading meteorological data...")
    geometry, met = NetCDFReader().read("path/to/aim_met.nc")  # Replace with actual path
    print(f"✓ Grid: {geometry.nx}×{geometry.ny}×{geometry.nz}, dt = {geometry.dt:g} s")
    print(f"  Wind bins: {met.u_bins.shape[0]}")

    emissions = read_emissions("path/to/emissions.nc")  # μg/s per cell
    print(f"✓ Emitted pollutants: {', '.join(sorted(emissions))}")

    # ========================================================================
    # 2. Configure Simulation
    # ========================================================================
    config = load_config("AIM.CFG")
    print("\n✓ Configuration:")
    print(f"  Minimum simulated days: {config.days_to_run:g}")
    print(f"  Workers: {config.num_workers or 'all CPUs'}")
    print(f"  Wet deposition: {config.wet_deposition}")

    # ========================================================================
    # 3. Run Simulation
    # ========================================================================
    print("\nRunning simulation...")
    engine = TimeIntegrationEngine(geometry, met, config)
    outputs = engine.run(emissions)

    # ========================================================================
    # 4. Write Output
    # ========================================================================
    output_dir = Path("output")
    output_dir.mkdir(exist_ok=True)
    out_path = output_dir / "aim_steady_state.nc"
    NetCDFWriter().write(out_path, outputs, geometry)

    print("\nOutput written:")
    print(f"  File: {out_path}")
    for name, arr in outputs.items():
        print(f"  {name:>12s}: max {arr.max():.3e} μg/m³")


if __name__ == "__main__":
    main()
