"""Command-line interface for three-level maser simulations."""

import argparse
import json
import logging
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from .core.simulation import MaserSimulation
from .config import ConfigManager, get_default_config
from .analysis import second_order_coherence
from .visualization.plotting import (
    plot_populations,
    plot_photon_number,
    plot_second_order_coherence,
    plot_photon_distribution,
    plot_qfunction
)

logger = logging.getLogger(__name__)


def main(argv=None):
    # Set up argument parser
    parser = argparse.ArgumentParser(description='Three-Level Maser Simulation Tool')

    # Input/output arguments
    parser.add_argument('-c', '--config', type=str, help='Path to configuration file')
    parser.add_argument('-o', '--output', type=str, default='results',
                        help='Output directory for results')

    # Output options
    parser.add_argument('--plot', action='store_true', help='Generate plots')
    parser.add_argument('--save', action='store_true', help='Save results to file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Load configuration
    if args.config:
        config = ConfigManager.load_config(args.config)
    else:
        logger.info("Using default configuration")
        config = get_default_config()

    # Create output directory
    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    try:
        params = ConfigManager.from_dict(config)
        simulation = MaserSimulation(params['maser'], params['simulation'])
        nph = simulation.settings.nph
        result = simulation.run()

        n_final = result.expect['photon_number'][-1].real
        g2_final = second_order_coherence(result.expect['photon_number_squared_term'][-1],
                                          result.expect['photon_number'][-1])
        logger.info("Final populations: P1=%.4f P2=%.4f P3=%.4f",
                    *(result.expect[f'population{k}'][-1].real for k in (1, 2, 3)))
        logger.info("Final photon number %.4f, g2(0)=%.4f", n_final, g2_final)

        if args.save:
            result_file = output_dir / 'expectation_values.json'
            with open(result_file, 'w') as f:
                json.dump(result.to_dict(), f, indent=2)
            filled = [k for k, rho in enumerate(result.snapshots) if rho is not None]
            np.savez_compressed(
                output_dir / 'snapshots.npz',
                times=result.snapshot_times[filled],
                states=np.array([result.snapshots[k] for k in filled]),
            )
            logger.info("Results saved to %s", output_dir)

        if args.plot:
            plots_dir = output_dir / 'plots'
            plots_dir.mkdir(exist_ok=True)

            fig, _ = plot_populations(result)
            fig.savefig(plots_dir / 'populations.png', dpi=300, bbox_inches='tight')

            fig, _ = plot_photon_number(result)
            fig.savefig(plots_dir / 'photon_number.png', dpi=300, bbox_inches='tight')

            fig, _ = plot_second_order_coherence(result)
            fig.savefig(plots_dir / 'g2.png', dpi=300, bbox_inches='tight')

            rho_ss = result.steady_state
            if rho_ss is not None:
                fig, _ = plot_photon_distribution(rho_ss, nph)
                fig.savefig(plots_dir / 'photon_distribution.png', dpi=300, bbox_inches='tight')

                fig, _ = plot_qfunction(rho_ss, nph)
                fig.savefig(plots_dir / 'qfunction.png', dpi=300, bbox_inches='tight')

            plt.close('all')
            logger.info("Plots saved to %s", plots_dir)

        logger.info("Simulation completed successfully!")

    except Exception:
        logger.exception("Error during simulation")
        raise

    return result


if __name__ == "__main__":
    main()
