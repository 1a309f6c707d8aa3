"""
Entrypoint module, in case you use `python -mlaser_vaccine`.
"""

from laser_vaccine.cli import main

if __name__ == "__main__":
    main()
