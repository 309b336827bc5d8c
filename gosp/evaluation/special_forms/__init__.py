"""Registry of parenthesised forms for the Gosp parser.

Each form is called right after its opening '(' has been consumed, as
`form(parser, state, opener)`. It returns None when the text is not that form
(the parser then rolls back and tries the next one), returns the parsed
expression on success, and raises GospError once it has recognised its
keyword but the rest does not parse.
"""

from gosp.evaluation.special_forms.let_form import let_form
from gosp.evaluation.special_forms.defun_form import defun_form
from gosp.evaluation.special_forms.call_form import call_form
from gosp.evaluation.special_forms.list_form import list_form

# Tried in order; call_form always matches and must stay last.
PAREN_FORMS = [
    let_form,
    defun_form,
    call_form,
]

KEYWORD_FORMS = {
    "let": let_form,
    "defun": defun_form,
}

__all__ = ["PAREN_FORMS", "KEYWORD_FORMS", "list_form"]
