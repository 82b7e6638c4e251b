import numpy as np
import pandas as pd


def get_xicor_simulated_data(
        num_points: int,
        seed: int = 0
) -> pd.DataFrame:

    """
    Simulates a dataset with one predictor `x`, evenly spaced on [0, 1), and several responses
    with different kinds of dependence on it:
        sine: sin(4 pi x), a non-monotonic function of x (two periods)
        square: x ** 2, a monotonic function of x
        noisy_sine: sine plus Gaussian noise with standard deviation 0.1
        noise: standard Gaussian noise, independent of x
    :param num_points: number of observations
    :param seed: seed for the noise columns
    :return: pandas dataframe with columns x, sine, square, noisy_sine and noise
    """
    if num_points < 1:
        raise ValueError('num_points must be positive, got ' + str(num_points))

    random_state = np.random.RandomState(seed)
    x = np.arange(num_points) / num_points
    sine = np.sin(4 * np.pi * x)

    return pd.DataFrame({
        'x': x,
        'sine': sine,
        'square': x ** 2,
        'noisy_sine': sine + 0.1 * random_state.standard_normal(size=num_points),
        'noise': random_state.standard_normal(size=num_points)
    })
