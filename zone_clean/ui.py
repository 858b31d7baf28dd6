"""Folder manager dialog for Zone Cleaner.

Built with wxPython so the controls are native Win32 widgets that
screen readers understand.  Two tabs: the watched folders, and the
extension allow-list (empty = all files).
"""

import logging
from typing import TYPE_CHECKING

import wx

from zone_clean import __app_name__
from zone_clean.filters import normalize_extension

if TYPE_CHECKING:
    from zone_clean.app import App

logger = logging.getLogger(__name__)

HINT_FG = (110, 110, 110)


class FolderManagerDialog:
    """Dialog for editing the watched folders and allowed extensions."""

    def __init__(self, app: "App"):
        """Create the dialog (hidden until ``show`` is called)."""
        self._app = app
        self._win: wx.Dialog | None = None
        self._folders: list[str] = []
        self._extensions: list[str] = []

    def show(self) -> None:
        """Show or focus the dialog."""
        if self._win is not None:
            self._win.Raise()
            self._win.SetFocus()
            return
        self._build()

    def _build(self) -> None:
        cfg = self._app.config
        self._folders = cfg.monitored_folders
        self._extensions = cfg.allowed_extensions

        self._win = wx.Dialog(
            None,
            title=f"{__app_name__} — Settings",
            size=(560, 440),
            style=wx.DEFAULT_DIALOG_STYLE,
        )
        self._win.Bind(wx.EVT_CLOSE, self._on_close_event)
        self._win.Bind(wx.EVT_CHAR_HOOK, self._on_char_hook)

        notebook = wx.Notebook(self._win)
        notebook.AddPage(self._build_folders_page(notebook), "Folders")
        notebook.AddPage(self._build_extensions_page(notebook), "Extensions")

        # ---- Buttons ----
        btn_sizer = wx.BoxSizer(wx.HORIZONTAL)
        save_btn = wx.Button(self._win, label="Save")
        save_btn.Bind(wx.EVT_BUTTON, self._on_save)
        btn_sizer.Add(save_btn, flag=wx.RIGHT, border=8)

        cancel_btn = wx.Button(self._win, label="Cancel")
        cancel_btn.Bind(wx.EVT_BUTTON, lambda e: self._on_close())
        btn_sizer.Add(cancel_btn)

        dlg_sizer = wx.BoxSizer(wx.VERTICAL)
        dlg_sizer.Add(notebook, proportion=1, flag=wx.EXPAND | wx.ALL, border=6)
        dlg_sizer.Add(btn_sizer, flag=wx.ALIGN_RIGHT | wx.ALL, border=10)
        self._win.SetSizer(dlg_sizer)

        self._win.Show()
        wx.CallAfter(self._win.Raise)

    def _build_folders_page(self, parent: wx.Window) -> wx.Panel:
        panel = wx.Panel(parent)
        sizer = wx.BoxSizer(wx.VERTICAL)
        sizer.Add(
            wx.StaticText(panel, label="Folders watched for downloaded files:"),
            flag=wx.ALL,
            border=10,
        )

        row = wx.BoxSizer(wx.HORIZONTAL)
        self._folder_list = wx.ListBox(panel, choices=self._folders, style=wx.LB_SINGLE)
        self._folder_list.SetName("Monitored folders")
        row.Add(self._folder_list, proportion=1, flag=wx.EXPAND | wx.RIGHT, border=8)

        buttons = wx.BoxSizer(wx.VERTICAL)
        add_btn = wx.Button(panel, label="Add…")
        add_btn.Bind(wx.EVT_BUTTON, self._on_add_folder)
        buttons.Add(add_btn, flag=wx.EXPAND | wx.BOTTOM, border=6)
        remove_btn = wx.Button(panel, label="Remove")
        remove_btn.Bind(wx.EVT_BUTTON, self._on_remove_folder)
        buttons.Add(remove_btn, flag=wx.EXPAND)
        row.Add(buttons)

        sizer.Add(row, proportion=1, flag=wx.EXPAND | wx.LEFT | wx.RIGHT | wx.BOTTOM, border=10)
        panel.SetSizer(sizer)
        return panel

    def _build_extensions_page(self, parent: wx.Window) -> wx.Panel:
        panel = wx.Panel(parent)
        sizer = wx.BoxSizer(wx.VERTICAL)
        sizer.Add(
            wx.StaticText(
                panel,
                label="Only files with these extensions are cleaned (empty = all files):",
            ),
            flag=wx.ALL,
            border=10,
        )

        row = wx.BoxSizer(wx.HORIZONTAL)
        self._ext_list = wx.ListBox(panel, choices=self._extensions, style=wx.LB_SINGLE)
        self._ext_list.SetName("Allowed extensions")
        row.Add(self._ext_list, proportion=1, flag=wx.EXPAND | wx.RIGHT, border=8)

        entry = wx.BoxSizer(wx.VERTICAL)
        entry.Add(wx.StaticText(panel, label="Extension:"), flag=wx.BOTTOM, border=4)
        self._ext_input = wx.TextCtrl(panel, size=(120, -1), style=wx.TE_PROCESS_ENTER)
        self._ext_input.SetName("Extension")
        self._ext_input.SetHint(".pdf")
        self._ext_input.Bind(wx.EVT_TEXT_ENTER, self._on_add_extension)
        entry.Add(self._ext_input, flag=wx.EXPAND | wx.BOTTOM, border=6)

        add_btn = wx.Button(panel, label="Add")
        add_btn.Bind(wx.EVT_BUTTON, self._on_add_extension)
        entry.Add(add_btn, flag=wx.EXPAND | wx.BOTTOM, border=6)
        remove_btn = wx.Button(panel, label="Remove")
        remove_btn.Bind(wx.EVT_BUTTON, self._on_remove_extension)
        entry.Add(remove_btn, flag=wx.EXPAND | wx.BOTTOM, border=6)

        hint = wx.StaticText(panel, label="e.g.  .pdf  .docx  .xlsx  .zip")
        hint.SetForegroundColour(wx.Colour(*HINT_FG))
        entry.Add(hint)
        row.Add(entry)

        sizer.Add(row, proportion=1, flag=wx.EXPAND | wx.LEFT | wx.RIGHT | wx.BOTTOM, border=10)
        panel.SetSizer(sizer)
        return panel

    def _on_char_hook(self, event: wx.KeyEvent) -> None:
        if event.GetKeyCode() == wx.WXK_ESCAPE:
            self._on_close()
        else:
            event.Skip()

    # ---- folders ----

    def _on_add_folder(self, event: wx.CommandEvent) -> None:
        dlg = wx.DirDialog(self._win, "Select a folder to watch")
        if dlg.ShowModal() == wx.ID_OK:
            path = dlg.GetPath()
            if path.casefold() not in {f.casefold() for f in self._folders}:
                self._folders.append(path)
                self._folder_list.Append(path)
        dlg.Destroy()

    def _on_remove_folder(self, event: wx.CommandEvent) -> None:
        index = self._folder_list.GetSelection()
        if index != wx.NOT_FOUND:
            del self._folders[index]
            self._folder_list.Delete(index)

    # ---- extensions ----

    def _on_add_extension(self, event: wx.CommandEvent) -> None:
        ext = normalize_extension(self._ext_input.GetValue())
        if ext and ext not in self._extensions:
            self._extensions.append(ext)
            self._ext_list.Append(ext)
        self._ext_input.Clear()
        self._ext_input.SetFocus()

    def _on_remove_extension(self, event: wx.CommandEvent) -> None:
        index = self._ext_list.GetSelection()
        if index != wx.NOT_FOUND:
            del self._extensions[index]
            self._ext_list.Delete(index)

    # ---- save / cancel ----

    def _on_save(self, event: wx.CommandEvent) -> None:
        self._app.apply_settings(list(self._folders), list(self._extensions))
        self._on_close()

    def _on_close_event(self, event: wx.CloseEvent) -> None:
        self._on_close()

    def _on_close(self) -> None:
        if self._win:
            self._win.Destroy()
            self._win = None
