# SheetMerge GUI
import os
import subprocess
import sys
import tkinter as tk
from tkinter import filedialog, messagebox

import customtkinter as ctk
import pandas as pd
from loguru import logger
from tkinterdnd2 import TkinterDnD, DND_ALL

from sheetmerge.config import MergePaths, read_config, resolve_output_path
from sheetmerge.merger import MergerFacade

ctk.set_default_color_theme("green")
ctk.set_appearance_mode("dark")

EXCEL_TYPES = (".xlsx", ".xlsm")

# (attribute prefix, button caption)
FILE_SLOTS = [
    ("source_a", "Select Source A Excel or\nDrag & Drop Here"),
    ("source_b", "Select Source B Excel or\nDrag & Drop Here"),
    ("mapping",  "Select Mapping Excel or\nDrag & Drop Here"),
    ("config",   "Select Config Excel or\nDrag & Drop Here"),
]


class CTkDnD(ctk.CTk, TkinterDnD.DnDWrapper):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.TkdndVersion = TkinterDnD._require(self)


class MergerGUI:
    """Handles the GUI for the sheet merger with drag-and-drop file selection and theme toggle."""

    def __init__(self, master=None):
        # Use our custom CTkDnD main window for drag-and-drop support.
        self.mergerApp = CTkDnD() if master is None else ctk.CTkToplevel(master)
        self.mergerApp.title("SheetMerge")

        self.paths = {slot: tk.StringVar() for slot, _ in FILE_SLOTS}
        self.output_path = tk.StringVar()
        self.buttons = {}

        self.config_preview = tk.StringVar(value="Sheet: -    Key column: -")
        self.mapping_preview = tk.StringVar(value="Mapping columns: -")

        # True = dark mode.
        self.theme_mode = tk.BooleanVar(value=True)

        self._build_gui()

    def _build_gui(self):
        self.mergerApp.grid_rowconfigure(0, weight=1)
        for col in range(len(FILE_SLOTS)):
            self.mergerApp.grid_columnconfigure(col, weight=1)

        for col, (slot, caption) in enumerate(FILE_SLOTS):
            frame = ctk.CTkFrame(self.mergerApp)
            frame.grid(row=0, column=col, padx=10, pady=10, sticky="nsew")
            frame.grid_columnconfigure(0, weight=1)
            self._build_file_section(frame, slot, caption)

        self.preview_frame = ctk.CTkFrame(self.mergerApp)
        self.preview_frame.grid(row=1, column=0, columnspan=len(FILE_SLOTS), padx=10, pady=(0, 10), sticky="ew")
        self._build_preview(self.preview_frame)

        self.controls_frame = ctk.CTkFrame(self.mergerApp)
        self.controls_frame.grid(row=2, column=0, columnspan=len(FILE_SLOTS), padx=10, pady=5, sticky="ew")
        self._build_controls(self.controls_frame)

    def _build_file_section(self, parent_frame, slot, caption):
        button = ctk.CTkButton(parent_frame,
            text=f"\n➕\n\n{caption}",
            command=lambda: self._browse(slot),
            border_width=3,
            fg_color="transparent",
            hover_color=("#D6D6D6", "#505050"),
            text_color=("#333333", "#FFFFFF"),
            corner_radius=10,
            width=180,
            height=150)
        button.grid(row=0, column=0, padx=20, pady=20, sticky="ew")
        button.drop_target_register(DND_ALL)
        button.dnd_bind('<<Drop>>', lambda event: self._drop(slot, event))
        self.buttons[slot] = button

    def _build_preview(self, parent_frame):
        font = ("Helvetica", 12)
        ctk.CTkLabel(parent_frame, text="Config", font=("Helvetica", 12, "bold")).grid(
            row=0, column=0, padx=5, pady=2, sticky="w")
        ctk.CTkLabel(parent_frame, textvariable=self.config_preview, font=font).grid(
            row=0, column=1, padx=5, pady=2, sticky="w")
        ctk.CTkLabel(parent_frame, text="Mapping", font=("Helvetica", 12, "bold")).grid(
            row=1, column=0, padx=5, pady=2, sticky="w")
        ctk.CTkLabel(parent_frame, textvariable=self.mapping_preview, font=font).grid(
            row=1, column=1, padx=5, pady=2, sticky="w")

    def _build_controls(self, parent_frame):
        font = ("Helvetica", 12)
        ctk.CTkLabel(parent_frame, text="Output Path:", font=font).grid(
            row=0, column=0, padx=5, pady=2, sticky="e")
        ctk.CTkEntry(parent_frame, textvariable=self.output_path, width=300).grid(
            row=0, column=1, padx=5, pady=2, sticky="ew")
        ctk.CTkButton(parent_frame, text="Use Source A Path", command=self._use_source_a_path).grid(
            row=0, column=2, padx=5, pady=2)
        ctk.CTkButton(parent_frame, text="Use Folder Defaults", command=self._use_folder_defaults).grid(
            row=0, column=3, padx=5, pady=2)
        self.theme_switch = ctk.CTkSwitch(parent_frame, text="", variable=self.theme_mode,
                                          command=self.toggle_theme, switch_width=20, switch_height=10)
        self.theme_switch.place(relx=1.0, rely=1.0, anchor="se")
        ctk.CTkButton(parent_frame, text="Start Merge", command=self._start_merge).grid(
            row=2, column=0, columnspan=4, pady=10)
        parent_frame.grid_columnconfigure(1, weight=1)

    def toggle_theme(self):
        mode = "dark" if self.theme_mode.get() else "light"
        ctk.set_appearance_mode(mode)
        logger.debug("Theme set to {} mode", mode)

    # --- File selection ---
    def _set_path(self, slot, file_path):
        self.paths[slot].set(file_path)
        self.buttons[slot].configure(text=os.path.basename(file_path), fg_color="#217346")
        if slot in ("config", "mapping"):
            self._refresh_preview()

    def _drop(self, slot, event):
        file_path = event.data.strip().replace("{", "").replace("}", "")
        if file_path.lower().endswith(EXCEL_TYPES):
            self._set_path(slot, file_path)
        else:
            messagebox.showerror("Error", "Please drag and drop a valid Excel file (.xlsx or .xlsm).")

    def _browse(self, slot):
        file_path = filedialog.askopenfilename(filetypes=[("Excel files", "*.xlsx *.xlsm")],
                                               title=f"Select {slot.replace('_', ' ').title()} File")
        if file_path:
            self._set_path(slot, file_path)

    def _use_source_a_path(self):
        source_a = self.paths["source_a"].get()
        if source_a:
            directory, file_name = os.path.split(source_a)
            name, ext = os.path.splitext(file_name)
            self.output_path.set(os.path.join(directory, f"{name}_merged{ext}"))

    def _use_folder_defaults(self):
        directory = filedialog.askdirectory(title="Select folder with a/b/mapping/conf workbooks")
        if not directory:
            return
        defaults = MergePaths.from_directory(directory)
        for slot, _ in FILE_SLOTS:
            candidate = getattr(defaults, slot)
            if os.path.exists(candidate):
                self._set_path(slot, candidate)
        self.output_path.set(defaults.output)

    def _refresh_preview(self):
        config_path = self.paths["config"].get()
        mapping_path = self.paths["mapping"].get()
        sheet_name = None
        try:
            if config_path:
                config = read_config(config_path)
                sheet_name = config.sheet_name
                self.config_preview.set(
                    f"Sheet: {config.sheet_name or '(first)'}    Key column: {config.key_column or '(none)'}"
                )
            if mapping_path:
                df = pd.read_excel(mapping_path, engine="openpyxl", sheet_name=sheet_name or 0, nrows=0)
                self.mapping_preview.set("Mapping columns: " + ", ".join(str(c) for c in df.columns))
        except Exception as e:
            logger.exception("Failed to preview config/mapping")
            messagebox.showerror("Error", f"Failed to read config or mapping headers: {e}")

    def _start_merge(self):
        # 1. Collect paths
        missing = [slot for slot, _ in FILE_SLOTS if not self.paths[slot].get().strip()]
        if missing:
            messagebox.showerror("Error", "Please select: " + ", ".join(m.replace("_", " ") for m in missing))
            return

        output = self.output_path.get().strip()
        if not output:
            messagebox.showerror("Error", "Please provide a valid output path.")
            return

        paths = MergePaths(
            source_a=self.paths["source_a"].get().strip(),
            source_b=self.paths["source_b"].get().strip(),
            mapping=self.paths["mapping"].get().strip(),
            config=self.paths["config"].get().strip(),
            output=resolve_output_path(output),
        )

        # 2. Delegate to the facade
        try:
            result = MergerFacade.run_merge(paths)
        except Exception as e:
            logger.exception("Merge failed")
            messagebox.showerror("Error", str(e))
            return

        if not result.written:
            messagebox.showerror("Error", f"Merged {len(result.rows)} rows but could not write\n\n{paths.output}")
            return

        if messagebox.askyesno(
                "Success",
                f"Merged {len(result.rows)} rows into\n\n{paths.output}\n\nWould you like to open it now?"
        ):
            open_file(paths.output)

    def run(self):
        if isinstance(self.mergerApp, ctk.CTk):
            self.mergerApp.mainloop()


def open_file(path):
    if sys.platform.startswith("win"):
        os.startfile(path)
    elif sys.platform == "darwin":
        subprocess.Popen(["open", path])
    else:
        subprocess.Popen(["xdg-open", path])


if __name__ == "__main__":
    app = MergerGUI()
    app.run()
