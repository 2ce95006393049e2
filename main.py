# main.py

from sheetmerge.logging_config import setup_logging
from sheetmerge_gui.merger_gui import MergerGUI

def main():
    setup_logging(log_dir="logs")
    # Create and launch the GUI
    app = MergerGUI()
    app.run()

if __name__ == "__main__":
    main()
