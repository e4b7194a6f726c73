import logging
import tkinter as tk

from core.common.app_context import AppContext, T
from letter.gui.letter_view import LetterView

logger = logging.getLogger(__name__)


class MainWindow(tk.Tk):
    def __init__(self):
        super().__init__()

        self.title(T("app.title"))
        self.geometry("1280x900")
        self.minsize(480, 480)

        self.view = LetterView(self)
        self.view.pack(fill="both", expand=True)


def main() -> None:
    AppContext.bootstrap()
    logger.info("Starting %s", AppContext.config.general.app_name)
    app = MainWindow()
    app.mainloop()


if __name__ == "__main__":
    main()
