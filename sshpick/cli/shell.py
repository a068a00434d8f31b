"""Shell integration snippets printed by ``sshpick init``."""

from __future__ import annotations

import shlex
import sys

__all__ = ["SUPPORTED_SHELLS", "render_init_script"]

_ZSH_TEMPLATE = r"""# sshpick: fuzzy host completion for ssh
# Load with: eval "$(sshpick init zsh)"

_sshpick_complete() {
  setopt localoptions noshwordsplit noksh_arrays noposixbuiltins
  local -a reply
  reply=("${(@f)$(__SSHPICK__ complete -- "$LBUFFER" 2>/dev/null)}")

  case "${reply[1]}" in
    replace)
      LBUFFER="${reply[2]}"
      zle reset-prompt
      ;;
    accept)
      LBUFFER="${reply[2]}"
      zle accept-line
      zle reset-prompt
      ;;
    noop)
      zle reset-prompt
      ;;
    *)
      zle ${_sshpick_default_completion:-expand-or-complete}
      ;;
  esac
}

# Remember the original Tab widget once so it can be used as the fallback.
if [ -z "$_sshpick_default_completion" ]; then
  _sshpick_binding=$(bindkey '^I')
  [[ $_sshpick_binding =~ 'undefined-key' ]] || _sshpick_default_completion=$_sshpick_binding[(s: :w)2]
  unset _sshpick_binding
fi

zle -N _sshpick_complete
bindkey '^I' _sshpick_complete
"""

SUPPORTED_SHELLS = ("zsh",)


def _self_command() -> str:
    return f"{shlex.quote(sys.executable)} -m sshpick"


def render_init_script(shell: str, command: str | None = None) -> str:
    """Return the widget source for ``shell``.

    ``command`` is the invocation used to call back into sshpick; it defaults
    to the running interpreter so the widget works without the console script
    on ``PATH``.
    """

    if shell not in SUPPORTED_SHELLS:
        msg = f"Unsupported shell '{shell}'. Supported: {', '.join(SUPPORTED_SHELLS)}."
        raise ValueError(msg)
    return _ZSH_TEMPLATE.replace("__SSHPICK__", command or _self_command())
