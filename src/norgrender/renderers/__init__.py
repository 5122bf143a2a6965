"""norgrender renderers.

- HtmlRenderer: dispatches AST nodes to paragraph and heading templates
- compose_inline: inline segment composition shared by paragraphs and titles
- LinkResolver: turns link targets into hrefs

"""

from norgrender.renderers.html import HtmlRenderer, RenderWarning
from norgrender.renderers.inline import compose_inline, plain_text
from norgrender.renderers.links import LinkResolver

__all__ = ["HtmlRenderer", "LinkResolver", "RenderWarning", "compose_inline", "plain_text"]
