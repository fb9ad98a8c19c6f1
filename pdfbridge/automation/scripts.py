"""Automation script generation for InDesign (ExtendScript) and Acrobat (AppleScript).

This is the only module that knows what the scripts do inside the Adobe
applications, including the pixel offsets and keystroke sequences used to
reach Acrobat's Compare Files tool. Nothing here touches the filesystem.
"""

from __future__ import annotations

import json
import re
from pathlib import Path

from pdfbridge.automation.models import AutomationJob, AutomationScript, JobMode, ScriptLanguage
from pdfbridge.config.constants import DEFAULT_CLICLICK_PATH, DEFAULT_INDESIGN_APP_NAME
from pdfbridge.config.settings import AcrobatLayoutConfig

_PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")

# ExtendScript run by InDesign. Values are substituted as JSON literals.
INDESIGN_EXPORT_TEMPLATE = """#target indesign

var SOURCE_PATH = {{source_path}};
var PDF_PATH = {{pdf_path}};
var AVAILABLE_FONTS = {{available_fonts}};
var EXPORT_PRESET = {{export_preset}};
var MAX_LISTED = 10;

function normalizeFontName(name) {
  return String(name).toLowerCase().replace(/[\\s_\\-]+/g, "");
}

function isAvailableFont(font) {
  var candidates = [];
  try { candidates.push(font.name); } catch (e) {}
  try { candidates.push(font.fontFamily); } catch (e) {}
  try { candidates.push(font.fontFamily + "-" + font.fontStyleName); } catch (e) {}
  try { candidates.push(font.postscriptName); } catch (e) {}
  for (var i = 0; i < candidates.length; i++) {
    var candidate = normalizeFontName(candidates[i]);
    for (var j = 0; j < AVAILABLE_FONTS.length; j++) {
      if (candidate === normalizeFontName(AVAILABLE_FONTS[j])) {
        return true;
      }
    }
  }
  return false;
}

function formatSection(title, items) {
  var text = "\\u2022 " + title + " (" + items.length + "):\\n";
  for (var i = 0; i < Math.min(items.length, MAX_LISTED); i++) {
    text += "  - " + items[i] + "\\n";
  }
  if (items.length > MAX_LISTED) {
    text += "  ... and " + (items.length - MAX_LISTED) + " more\\n";
  }
  return text + "\\n";
}

function auditDocument(doc) {
  var missingFonts = [];
  var missingLinks = [];
  var corruptLinks = [];
  var problems = "";

  try {
    for (var i = 0; i < doc.fonts.length; i++) {
      var font = doc.fonts[i];
      if (font.status === FontStatus.NOT_AVAILABLE || font.status === FontStatus.UNKNOWN) {
        if (isAvailableFont(font)) {
          $.writeln("WARNING: Font not loaded yet but available: " + font.name);
        } else {
          missingFonts.push(font.name + " (" + font.fontFamily + " " + font.fontStyleName + ")");
        }
      }
    }

    for (var k = 0; k < doc.links.length; k++) {
      var link = doc.links[k];
      if (link.status === LinkStatus.LINK_MISSING) {
        missingLinks.push(link.name);
      } else if (link.status === LinkStatus.NORMAL) {
        try {
          if (!File(link.filePath).exists) {
            corruptLinks.push(link.name);
          }
        } catch (e) {
          corruptLinks.push(link.name);
        }
      }
    }
  } catch (e) {
    problems += "Error checking document: " + e.message + "\\n";
  }

  if (missingFonts.length > 0) {
    problems += formatSection("Missing Fonts", missingFonts);
  }
  if (missingLinks.length > 0) {
    problems += formatSection("Missing Images/Links", missingLinks);
  }
  if (corruptLinks.length > 0) {
    problems += formatSection("Corrupt/Inaccessible Images", corruptLinks);
  }

  if (problems === "") {
    return null;
  }
  return "Document has critical errors that prevent PDF export:\\n\\n" + problems +
    "\\nPlease fix these issues in InDesign before converting to PDF.";
}

var doc;
try {
  $.writeln("Starting InDesign conversion script...");
  app.scriptPreferences.userInteractionLevel = UserInteractionLevels.NEVER_INTERACT;

  var sourceFile = File(SOURCE_PATH);
  if (!sourceFile.exists) {
    throw new Error("Source file not found");
  }

  try {
    doc = app.open(sourceFile, false);
  } catch (openErr) {
    throw new Error("Failed to open document. The file may be corrupt or created in a newer version of InDesign.");
  }
  $.writeln("Document opened successfully. Pages: " + doc.pages.length);

  var auditMessage = auditDocument(doc);
  if (auditMessage) {
    throw new Error(auditMessage);
  }

  var pdfFile = File(PDF_PATH);
  $.writeln("Starting PDF export...");
  try {
    app.pdfExportPreferences.pageRange = PageRange.ALL_PAGES;
    if (EXPORT_PRESET) {
      doc.exportFile(ExportFormat.PDF_TYPE, pdfFile, false, app.pdfExportPresets.itemByName(EXPORT_PRESET));
    } else {
      doc.exportFile(ExportFormat.PDF_TYPE, pdfFile, false);
    }
  } catch (exportErr) {
    throw new Error("PDF export failed: " + exportErr.message);
  }
  if (!pdfFile.exists) {
    throw new Error("PDF file was not created");
  }
  $.writeln("PDF export completed successfully");

  doc.close(SaveOptions.NO);
  app.quit();
  "SUCCESS";
} catch (err) {
  $.writeln("ERROR: " + err.message);
  if (typeof doc !== "undefined" && doc !== null) {
    try { doc.close(SaveOptions.NO); } catch (e) {}
  }
  try { app.quit(); } catch (e) {}
  throw err;
}
"""

# AppleScript bridge used on macOS to hand an ExtendScript file to InDesign
INDESIGN_WRAPPER_TEMPLATE = """tell application {{app_name}}
\tactivate
\tset scriptFile to POSIX file {{script_path}}
\tdo script scriptFile language javascript
end tell
"""

ACROBAT_COMPARE_TEMPLATE = """on pickFile(folderPath, fileName)
\ttell application "System Events"
\t\tkey code 5 using {command down, shift down}
\t\tdelay {{dialog_delay}}
\t\tkey code 0 using {command down}
\t\tdelay 0.5
\t\tkeystroke folderPath
\t\tdelay 2
\t\tkey code 36
\t\tdelay {{dialog_delay}}
\t\tkeystroke fileName
\t\tdelay 2
\t\tkey code 36
\t\tdelay 2
\tend tell
end pickFile

try
\ttell application "Adobe Acrobat"
\t\tlaunch
\t\tactivate
\t\tdelay {{launch_delay}}
\tend tell

\ttell application "System Events"
\t\ttell process "Acrobat"
\t\t\tset frontmost to true
\t\t\tdelay {{activate_delay}}

\t\t\trepeat {{window_wait_attempts}} times
\t\t\t\tif (count of windows) > 0 then exit repeat
\t\t\t\tdelay 1
\t\t\tend repeat
\t\t\tif (count of windows) = 0 then error "Acrobat window not available"

\t\t\tset win to window 1
\t\t\tset {winX, winY} to position of win
\t\t\tset {winWidth, winHeight} to size of win
\t\t\tlog "Window frame: " & winX & "," & winY & " " & winWidth & "x" & winHeight

\t\t\t-- "See all tools" button
\t\t\tset toolsX to winX + winWidth - {{see_all_tools_right_offset}}
\t\t\tset toolsY to winY + {{see_all_tools_top_offset}}
\t\t\tdo shell script quoted form of {{cliclick}} & " c:" & toolsX & "," & toolsY
\t\t\tdelay {{tools_panel_delay}}

\t\t\t-- "Find any tool" search box, centered horizontally
\t\t\tset {panelX, panelY} to position of win
\t\t\tset {panelWidth, panelHeight} to size of win
\t\t\tset searchX to (panelX + (panelWidth / 2)) as integer
\t\t\tset searchY to (panelY + {{search_box_top_offset}}) as integer
\t\t\tdo shell script quoted form of {{cliclick}} & " c:" & searchX & "," & searchY
\t\t\tdelay 1
\t\t\tdo shell script quoted form of {{cliclick}} & " tc:" & searchX & "," & searchY
\t\t\tdelay 0.5
\t\t\tdo shell script quoted form of {{cliclick}} & " t:" & quoted form of {{search_query}}
\t\t\tdelay {{search_delay}}

\t\t\trepeat {{tabs_to_compare_tool}} times
\t\t\t\tkey code 48
\t\t\t\tdelay 0.5
\t\t\tend repeat
\t\t\tkey code 36
\t\t\tdelay {{compare_tool_delay}}
\t\t\tlog "Compare Files tool opened"

\t\t\t-- "Select File" for the new file (first in tab order)
\t\t\tkey code 48
\t\t\tdelay 0.5
\t\t\tkey code 49
\t\t\tdelay {{dialog_delay}}
\t\tend tell
\tend tell
\tpickFile({{new_folder}}, {{new_name}})

\ttell application "System Events"
\t\ttell process "Acrobat"
\t\t\t-- "Select File" for the old file
\t\t\tkey code 48
\t\t\tdelay 0.5
\t\t\tkey code 49
\t\t\tdelay {{dialog_delay}}
\t\tend tell
\tend tell
\tpickFile({{old_folder}}, {{old_name}})

\ttell application "System Events"
\t\ttell process "Acrobat"
\t\t\trepeat {{tabs_to_compare_button}} times
\t\t\t\tkey code 48
\t\t\t\tdelay 0.3
\t\t\tend repeat
\t\t\tkey code 36
\t\t\tdelay {{compare_start_delay}}
\t\t\tlog "Comparison started"
\t\t\tdelay {{compare_completion_delay}}

\t\t\t-- Save the report into the output folder
\t\t\tkey code 1 using {command down}
\t\t\tdelay 1
\t\t\tkey code 36
\t\t\tdelay 1
\t\t\tkey code 5 using {command down, shift down}
\t\t\tdelay 1
\t\t\tkeystroke {{output_folder}}
\t\t\tdelay 0.5
\t\t\tkey code 36
\t\t\tdelay 0.5
\t\t\tkey code 36
\t\t\tdelay 1
\t\tend tell
\tend tell
\tlog "Comparison completed and saved"
\treturn "COMPLETED"
on error errMsg number errNum
\treturn "COMPARISON_FAILED: " & errMsg & " (" & errNum & ")"
end try
"""


def render(template: str, **values: str) -> str:
    """Fill ``{{name}}`` placeholders; every placeholder must be supplied."""

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in values:
            raise KeyError(f"No value for template placeholder: {name}")
        return values[name]

    return _PLACEHOLDER_RE.sub(_replace, template)


def js_literal(value: object) -> str:
    """Encode a value as an ExtendScript literal."""
    return json.dumps(value)


def js_path(path: Path) -> str:
    """ExtendScript ``File`` paths use forward slashes on every platform."""
    return js_literal(str(path).replace("\\", "/"))


def applescript_string(value: str) -> str:
    """Quote a value as an AppleScript string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def build_indesign_wrapper(script_path: Path, app_name: str = DEFAULT_INDESIGN_APP_NAME) -> str:
    """AppleScript that asks a running InDesign to execute an ExtendScript file."""
    return render(
        INDESIGN_WRAPPER_TEMPLATE,
        app_name=applescript_string(app_name),
        script_path=applescript_string(str(script_path)),
    )


class ScriptGenerator:
    """Builds the automation script for a job.

    Args:
        export_preset: Optional InDesign PDF export preset name
        layout: Acrobat window offsets, keystroke counts and delays
        cliclick_path: Path to the ``cliclick`` binary used for mouse clicks
    """

    def __init__(
        self,
        export_preset: str | None = None,
        layout: AcrobatLayoutConfig | None = None,
        cliclick_path: str = DEFAULT_CLICLICK_PATH,
    ) -> None:
        self.export_preset = export_preset
        self.layout = layout or AcrobatLayoutConfig()
        self.cliclick_path = cliclick_path

    def generate(self, job: AutomationJob) -> AutomationScript:
        """Return the script text for ``job``.

        Input paths are expected to be absolute and already validated.
        """
        if job.mode is JobMode.CONVERT:
            return self._conversion_script(job)
        return self._comparison_script(job)

    def _conversion_script(self, job: AutomationJob) -> AutomationScript:
        text = render(
            INDESIGN_EXPORT_TEMPLATE,
            source_path=js_path(job.input_paths[0]),
            pdf_path=js_path(job.output_path),
            available_fonts=js_literal(list(job.resource_hints)),
            export_preset=js_literal(self.export_preset),
        )
        return AutomationScript(text=text, language=ScriptLanguage.EXTENDSCRIPT)

    def _comparison_script(self, job: AutomationJob) -> AutomationScript:
        old_file, new_file = job.input_paths
        layout = self.layout
        text = render(
            ACROBAT_COMPARE_TEMPLATE,
            cliclick=applescript_string(self.cliclick_path),
            launch_delay=_number(layout.launch_delay),
            activate_delay=_number(layout.activate_delay),
            window_wait_attempts=str(layout.window_wait_attempts),
            see_all_tools_right_offset=str(layout.see_all_tools_right_offset),
            see_all_tools_top_offset=str(layout.see_all_tools_top_offset),
            tools_panel_delay=_number(layout.tools_panel_delay),
            search_box_top_offset=str(layout.search_box_top_offset),
            search_query=applescript_string(layout.search_query),
            search_delay=_number(layout.search_delay),
            tabs_to_compare_tool=str(layout.tabs_to_compare_tool),
            compare_tool_delay=_number(layout.compare_tool_delay),
            dialog_delay=_number(layout.file_dialog_delay),
            tabs_to_compare_button=str(layout.tabs_to_compare_button),
            compare_start_delay=_number(layout.compare_start_delay),
            compare_completion_delay=_number(layout.compare_completion_delay),
            new_folder=applescript_string(str(new_file.parent)),
            new_name=applescript_string(new_file.name),
            old_folder=applescript_string(str(old_file.parent)),
            old_name=applescript_string(old_file.name),
            output_folder=applescript_string(str(job.output_dir)),
        )
        return AutomationScript(text=text, language=ScriptLanguage.APPLESCRIPT)
