"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["upload", "download", "cancel", "jobs", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#1E90FF bold",
        "command": "#0088ff bold",
    }
)

BLUE = "\033[38;2;30;144;255m"
GREEN = "\033[32m"
RED = "\033[31m"
RESET = "\033[0m"

LOGO = f"""{BLUE}
 ██╗  ██╗███████╗██╗  ██╗██╗   ██╗██████╗ ██╗      ██████╗  █████╗ ██████╗
 ██║ ██╔╝██╔════╝██║ ██╔╝██║   ██║██╔══██╗██║     ██╔═══██╗██╔══██╗██╔══██╗
 █████╔╝ █████╗  █████╔╝ ██║   ██║██████╔╝██║     ██║   ██║███████║██║  ██║
 ██╔═██╗ ██╔══╝  ██╔═██╗ ██║   ██║██╔═══╝ ██║     ██║   ██║██╔══██║██║  ██║
 ██║  ██╗███████╗██║  ██╗╚██████╔╝██║     ███████╗╚██████╔╝██║  ██║██████╔╝
 ╚═╝  ╚═╝╚══════╝╚═╝  ╚═╝ ╚═════╝ ╚═╝     ╚══════╝ ╚═════╝ ╚═╝  ╚═╝╚═════╝
{RESET}"""

WELCOME_TITLE = "KekUpload CLI - Chunked file transfers"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "kekupload> "

HELP_TEXT = """Available commands:
  upload <path> [<path> ...]          Queue files for upload (one job per file)
  download <id> [output_path]         Download an uploaded file (default output: ./<id>)
  cancel <job_id>                     Cancel a running or queued upload job
  jobs                                Show the running job and the queue
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL (running uploads are abandoned)

Uploads run one at a time in the order they were queued.
Examples:
  upload holiday.mp4 notes.txt
  jobs
  cancel 1
  download 3xAmPlE
  download 3xAmPlE downloads/holiday.mp4"""

DEFAULT_CONFIG_PATH_PARTS = (".kekupload", "config.json")
