"""Article preview rendering."""

import os
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from ..interfaces.store import Article
from ..models.enums import UnknownTagPolicy
from ..serialization.html_deserializer import HtmlDeserializer
from ..serialization.html_serializer import HtmlSerializer
from ..serialization.report import ParseReport


class PreviewRenderer:
    """
    Renders a stored article as a standalone HTML page.

    Uses Jinja2 templates. Article content is parsed and serialized again
    before it is marked safe, so only markup the editor can produce
    reaches the page.
    """

    def __init__(self, template_dir: Optional[str] = None,
                 unknown_tag_policy: UnknownTagPolicy = UnknownTagPolicy.UNWRAP):
        """
        Initialize the preview renderer.

        Args:
            template_dir: Directory containing Jinja2 templates.
                         If not provided, uses the package's templates.
            unknown_tag_policy: Policy for foreign tags in article content.
        """
        if template_dir is None:
            template_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")

        self.template_dir = template_dir
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(['html', 'xml'])
        )
        self._deserializer = HtmlDeserializer(unknown_tag_policy)
        self._serializer = HtmlSerializer()

    def sanitize(self, content: str, report: Optional[ParseReport] = None) -> Markup:
        """Content reduced to the editor's own markup, safe to embed."""
        doc = self._deserializer.deserialize(content, report)
        return Markup(self._serializer.serialize(doc))

    def render_article(self, article: Article) -> str:
        """
        Render the preview page for an article.

        Args:
            article: Article to render.

        Returns:
            HTML string for the preview page.
        """
        template = self.env.get_template('article_preview.html')
        return template.render(
            title=article.title,
            category=article.category.value,
            country=article.country or '',
            author=article.author or '',
            thumbnail=article.thumbnail,
            excerpt=article.excerpt or '',
            status=article.status.value,
            published=article.created_at.strftime('%B %d, %Y') if article.created_at else '',
            content=self.sanitize(article.content),
        )
