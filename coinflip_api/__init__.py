"""coinflip_api – HTTP front-end for the coin-flip bandit game."""
