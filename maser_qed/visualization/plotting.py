"""Visualization tools for maser simulations."""

from typing import Optional, Tuple
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.axes import Axes

from ..models import SimulationResult
from ..analysis import second_order_coherence, photon_distribution, ptrace_cavity, qfunc


def _figure(ax: Optional[Axes], figsize: Tuple[float, float]):
    if ax is None:
        return plt.subplots(figsize=figsize)
    return ax.figure, ax


def plot_populations(
    result: SimulationResult,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (10, 6),
    title: str = "Atomic Level Populations",
    **kwargs
) -> Tuple[Figure, Axes]:
    """Plot the populations of the three atomic levels against time.

    Args:
        result: Simulation result containing population time series
        ax: Optional matplotlib axes to plot on
        figsize: Figure size (width, height) in inches
        title: Plot title
        **kwargs: Additional keyword arguments passed to plot()

    Returns:
        Tuple of (figure, axes) containing the plot
    """
    fig, ax = _figure(ax, figsize)

    for level in (1, 2, 3):
        ax.plot(result.times, np.real(result.expect[f'population{level}']),
                label=f'$P_{level}$', **kwargs)

    ax.set_xlabel('Time')
    ax.set_ylabel('Population')
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)

    return fig, ax


def plot_photon_number(
    result: SimulationResult,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (10, 6),
    title: str = "Mean Photon Number",
    **kwargs
) -> Tuple[Figure, Axes]:
    """Plot <a^dag a> against time."""
    fig, ax = _figure(ax, figsize)

    ax.plot(result.times, np.real(result.expect['photon_number']), **kwargs)
    ax.set_xlabel('Time')
    ax.set_ylabel(r'$\langle a^\dagger a \rangle$')
    ax.set_title(title)
    ax.grid(True, alpha=0.3)

    return fig, ax


def plot_second_order_coherence(
    result: SimulationResult,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (10, 6),
    title: str = "Second-Order Coherence",
    **kwargs
) -> Tuple[Figure, Axes]:
    """Plot g2(0) against time, with the thermal and coherent references.

    Times with an empty cavity have undefined g2 and are left blank.
    """
    fig, ax = _figure(ax, figsize)

    g2 = second_order_coherence(result.expect['photon_number_squared_term'],
                                result.expect['photon_number'])
    ax.plot(result.times, g2, **kwargs)
    ax.axhline(2.0, color='gray', linestyle='--', alpha=0.6, label='thermal')
    ax.axhline(1.0, color='gray', linestyle=':', alpha=0.6, label='coherent')
    ax.set_xlabel('Time')
    ax.set_ylabel(r'$g^{(2)}(0)$')
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)

    return fig, ax


def plot_photon_distribution(
    rho: np.ndarray,
    nph: int,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (8, 5),
    title: str = "Photon Number Distribution"
) -> Tuple[Figure, Axes]:
    """Bar chart of P(n) for the cavity part of a density matrix.

    Args:
        rho: Density matrix of the atom-cavity system
        nph: Photon-number truncation of the cavity
        ax: Optional matplotlib axes to plot on
        figsize: Figure size (width, height) in inches
        title: Plot title

    Returns:
        Tuple of (figure, axes) containing the plot
    """
    fig, ax = _figure(ax, figsize)

    p = photon_distribution(rho, nph)
    ax.bar(np.arange(nph + 1), p, color='#1f77b4')
    ax.set_xlabel('Photon number n')
    ax.set_ylabel('P(n)')
    ax.set_title(title)
    ax.grid(axis='y', alpha=0.3)

    return fig, ax


def plot_qfunction(
    rho: np.ndarray,
    nph: int,
    extent: float = 5.0,
    n_points: int = 100,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (8, 6),
    cmap: str = 'viridis'
) -> Tuple[Figure, Axes]:
    """Plot the Husimi Q function of the cavity field."""
    fig, ax = _figure(ax, figsize)

    xvec = np.linspace(-extent, extent, n_points)
    Q = qfunc(ptrace_cavity(rho, nph), xvec, xvec)

    im = ax.pcolormesh(xvec, xvec, Q, cmap=cmap, shading='auto')
    plt.colorbar(im, ax=ax, label='Q(x, y)')
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.set_aspect('equal')
    ax.set_title('Cavity Q Function')

    return fig, ax
