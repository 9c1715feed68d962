"""ASCII banner shown when ghapin is run without a command"""

_BANNER = r"""
       _                 _
  __ _| |__   __ _ _ __ (_)_ __
 / _` | '_ \ / _` | '_ \| | '_ \
| (_| | | | | (_| | |_) | | | | |
 \__, |_| |_|\__,_| .__/|_|_| |_|
 |___/            |_|
  pin and update GitHub Actions
"""
