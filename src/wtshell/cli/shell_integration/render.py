"""Shell integration script rendering.

Each supported shell gets a function named after the underlying command
(`git` by default) that intercepts `git wt ...`:

- engine "shell": the function itself runs the wrapped command, hides
  `CD:<path>` lines from its stdout, and `cd`s after the command exits
- engine "python": the function hands the invocation to `wtshell git ...`,
  which does the same work and leaves the target in a handoff file

All other invocations go straight to the real command.
"""

import shlex

from wtshell import __version__
from wtshell.core.directive import DIRECTIVE_PREFIX
from wtshell.core.global_config import GlobalConfig

SUPPORTED_SHELLS = ("bash", "zsh", "fish")
ENGINES = ("shell", "python")

# Literal braces are doubled for str.format().
_POSIX_SHELL_ENGINE = """\
# wtshell integration {version} ({shell})
# Load with: eval "$(wtshell init {shell})"
{function}() {{
    if [ "$1" = {token} ]; then
        shift
        local __wtshell_target __wtshell_exit
        {{
            __wtshell_target=$(
                command {wrapped} "$@" 3>&- | {{
                    __wtshell_cd=""
                    while :; do
                        __wtshell_eol=1
                        IFS= read -r __wtshell_line || __wtshell_eol=0
                        if [ "$__wtshell_eol" -eq 0 ] && [ -z "$__wtshell_line" ]; then
                            break
                        fi
                        case "$__wtshell_line" in
                            {prefix}?*)
                                __wtshell_cd="${{__wtshell_line#{prefix}}}"
                                ;;
                            *)
                                if [ "$__wtshell_eol" -eq 1 ]; then
                                    printf '%s\\n' "$__wtshell_line" >&3
                                else
                                    printf '%s' "$__wtshell_line" >&3
                                fi
                                ;;
                        esac
                        [ "$__wtshell_eol" -eq 1 ] || break
                    done
                    printf '%s' "$__wtshell_cd"
                }}
                exit "{pipestatus}"
            )
        }} 3>&1
        __wtshell_exit=$?
        if [ -n "$__wtshell_target" ] && [ -d "$__wtshell_target" ]; then
            cd -- "$__wtshell_target" || :
        fi
        return "$__wtshell_exit"
    fi
    command {underlying} "$@"
}}
"""

_POSIX_PYTHON_ENGINE = """\
# wtshell integration {version} ({shell}, python engine)
# Load with: eval "$(wtshell init {shell} --engine python)"
{function}() {{
    if [ "$1" = {token} ]; then
        local __wtshell_cd_file __wtshell_target __wtshell_exit
        __wtshell_cd_file=$(mktemp "${{TMPDIR:-/tmp}}/wtshell-cd.XXXXXX") || return 1
        WTSHELL_CD_FILE="$__wtshell_cd_file" command {wtshell} git -- "$@"
        __wtshell_exit=$?
        __wtshell_target=$(cat -- "$__wtshell_cd_file" 2>/dev/null)
        rm -f -- "$__wtshell_cd_file"
        if [ -n "$__wtshell_target" ] && [ -d "$__wtshell_target" ]; then
            cd -- "$__wtshell_target" || :
        fi
        return "$__wtshell_exit"
    fi
    command {underlying} "$@"
}}
"""

_FISH_SHELL_ENGINE = """\
# wtshell integration {version} (fish)
# Load with: wtshell init fish | source
function {function} --wraps {underlying} --description {description}
    if test (count $argv) -gt 0; and test "$argv[1]" = {token}
        set -l __wtshell_target ""
        command {wrapped} $argv[2..-1] | while read -l __wtshell_line
            if string match -q -- {pattern} $__wtshell_line
                set __wtshell_target (string sub -s {path_start} -- $__wtshell_line)
            else
                printf '%s\\n' $__wtshell_line
            end
        end
        set -l __wtshell_exit $pipestatus[1]
        if test -n "$__wtshell_target"; and test -d "$__wtshell_target"
            cd $__wtshell_target
        end
        return $__wtshell_exit
    end
    command {underlying} $argv
end
"""

_FISH_PYTHON_ENGINE = """\
# wtshell integration {version} (fish, python engine)
# Load with: wtshell init fish --engine python | source
function {function} --wraps {underlying} --description {description}
    if test (count $argv) -gt 0; and test "$argv[1]" = {token}
        set -l __wtshell_tmpdir /tmp
        if set -q TMPDIR
            set __wtshell_tmpdir $TMPDIR
        end
        set -l __wtshell_cd_file (mktemp "$__wtshell_tmpdir/wtshell-cd.XXXXXX")
        or return 1
        env WTSHELL_CD_FILE=$__wtshell_cd_file {wtshell} git -- $argv
        set -l __wtshell_exit $status
        set -l __wtshell_target (cat $__wtshell_cd_file 2>/dev/null)
        rm -f $__wtshell_cd_file
        if test -n "$__wtshell_target"; and test -d "$__wtshell_target"
            cd $__wtshell_target
        end
        return $__wtshell_exit
    end
    command {underlying} $argv
end
"""


def _quote_fish(value: str) -> str:
    """Quote a string for fish, escaping characters that trigger expansion."""
    if not value:
        return '""'

    escape_map = {
        "\\": "\\\\",
        '"': '\\"',
        "$": "\\$",
        "`": "\\`",
        "~": "\\~",
        "*": "\\*",
        "?": "\\?",
        "{": "\\{",
        "}": "\\}",
        "[": "\\[",
        "]": "\\]",
        "(": "\\(",
        ")": "\\)",
        "<": "\\<",
        ">": "\\>",
        "|": "\\|",
        ";": "\\;",
        "&": "\\&",
        "\n": "\\n",
        "\t": "\\t",
    }
    escaped = "".join(escape_map.get(ch, ch) for ch in value)
    return f'"{escaped}"'


def _validate_function_name(name: str) -> str:
    """Function names cannot be quoted, so only allow plain command names."""
    if not name or not all(ch.isalnum() or ch in "-_." for ch in name):
        raise ValueError(f"Cannot define a shell function named {name!r}")
    return name


def _render_posix_shell_engine(config: GlobalConfig, shell: str) -> str:
    pipestatus = "${PIPESTATUS[0]}" if shell == "bash" else "${pipestatus[1]}"
    return _POSIX_SHELL_ENGINE.format(
        version=__version__,
        shell=shell,
        function=_validate_function_name(config.underlying_command),
        token=shlex.quote(config.subcommand_token),
        wrapped=shlex.quote(config.wrapped_command),
        underlying=shlex.quote(config.underlying_command),
        prefix=DIRECTIVE_PREFIX,
        pipestatus=pipestatus,
    )


def _render_posix_python_engine(config: GlobalConfig, shell: str, wtshell_command: str) -> str:
    return _POSIX_PYTHON_ENGINE.format(
        version=__version__,
        shell=shell,
        function=_validate_function_name(config.underlying_command),
        token=shlex.quote(config.subcommand_token),
        underlying=shlex.quote(config.underlying_command),
        wtshell=shlex.quote(wtshell_command),
    )


def _render_fish_shell_engine(config: GlobalConfig) -> str:
    return _FISH_SHELL_ENGINE.format(
        version=__version__,
        function=_validate_function_name(config.underlying_command),
        description=_quote_fish(f"{config.underlying_command} with {config.wrapped_command}"),
        token=_quote_fish(config.subcommand_token),
        wrapped=_quote_fish(config.wrapped_command),
        underlying=_quote_fish(config.underlying_command),
        pattern=_quote_fish(DIRECTIVE_PREFIX) + "'?*'",
        path_start=len(DIRECTIVE_PREFIX) + 1,
    )


def _render_fish_python_engine(config: GlobalConfig, wtshell_command: str) -> str:
    return _FISH_PYTHON_ENGINE.format(
        version=__version__,
        function=_validate_function_name(config.underlying_command),
        description=_quote_fish(f"{config.underlying_command} with {config.wrapped_command}"),
        token=_quote_fish(config.subcommand_token),
        underlying=_quote_fish(config.underlying_command),
        wtshell=_quote_fish(wtshell_command),
    )


def render_integration(
    shell: str,
    config: GlobalConfig,
    *,
    engine: str = "shell",
    wtshell_command: str = "wtshell",
) -> str:
    """Render the integration function for a shell.

    Args:
        shell: One of SUPPORTED_SHELLS
        config: Names of the underlying command, token and wrapped command
        engine: "shell" for a self-contained function, "python" to delegate
            to `wtshell git`
        wtshell_command: How the python engine invokes wtshell

    Returns:
        Script text ending in a newline, suitable for eval or source

    Raises:
        ValueError: If the shell or engine is unsupported, or the underlying
            command cannot be used as a function name
    """
    if shell not in SUPPORTED_SHELLS:
        raise ValueError(f"Unsupported shell: {shell}")
    if engine not in ENGINES:
        raise ValueError(f"Unsupported engine: {engine}")

    if shell == "fish":
        if engine == "python":
            return _render_fish_python_engine(config, wtshell_command)
        return _render_fish_shell_engine(config)

    if engine == "python":
        return _render_posix_python_engine(config, shell, wtshell_command)
    return _render_posix_shell_engine(config, shell)
