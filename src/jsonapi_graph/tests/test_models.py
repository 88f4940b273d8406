import pytest

from ..deferred import Deferred
from ..exceptions import InvalidDeclarationError
from ..models import Model, ModelRegistry, RelationshipType, ToMany, ToOne
from ..serde.models import ResourceRepr
from .testing import Article, Comment, Node, Owner, Person, Pet, Tag


class TestModel:
    def test_declaration(self):
        assert Article.attribute_names == ("title",)
        assert list(Article.relationships) == ["author", "comments"]
        author = Article.relationships["author"]
        assert author.type is RelationshipType.TO_ONE
        assert author.name == "author"
        assert author.parent is Article
        assert author.destination is Person
        assert Article.relationships["comments"].type is RelationshipType.TO_MANY
        assert Article.relationships["comments"].destination is Comment

    def test_deferred_destination(self):
        assert Node.relationships["next"].destination is Node
        assert Person.relationships["articles"].destination is Article

    def test_inheritance(self):
        class FeaturedArticle(Article):
            class Meta:
                attributes = ("rank",)
                relationships = {"tags": ToMany(Tag)}

        assert FeaturedArticle.attribute_names == ("title", "rank")
        assert list(FeaturedArticle.relationships) == ["author", "comments", "tags"]
        assert list(Article.relationships) == ["author", "comments"]

    def test_populate_from_resource(self):
        article = Article()
        assert not article.has_relation("author")
        article.populate_from_resource(
            ResourceRepr(
                type="articles",
                id="1",
                attributes={"title": "Hello", "draft": False},
                meta={"views": 3},
            )
        )
        assert article.key == ("articles", "1")
        assert article.title == "Hello"
        assert article["draft"] is False
        assert article.meta == {"views": 3}
        with pytest.raises(KeyError):
            article["body"]

    def test_missing_declared_attribute(self):
        article = Article()
        article.populate_from_resource(ResourceRepr(type="articles", id="1"))
        assert article.title is None

    def test_set_relation(self):
        article, person = Article(), Person()
        article.set_relation("author", person)
        assert article.has_relation("author")
        assert article.related("author") is person
        assert article.author is person
        assert article.related("comments") is None
        assert article.related("comments", []) == []

    def test_relationship_descriptor(self):
        article = Article()
        assert article.relationship_descriptor("author") is Article.relationships["author"]
        assert article.relationship_descriptor("editor") is None

    def test_invalid_relationship_declaration(self):
        with pytest.raises(InvalidDeclarationError):

            class Broken(Model):
                class Meta:
                    relationships = {"author": Person}

    def test_reserved_name(self):
        with pytest.raises(InvalidDeclarationError):

            class Broken(Model):
                class Meta:
                    attributes = ("id",)

        with pytest.raises(InvalidDeclarationError):

            class Broken2(Model):
                class Meta:
                    relationships = {"related": ToOne(Person)}

    def test_name_clash(self):
        with pytest.raises(InvalidDeclarationError):

            class Broken(Model):
                class Meta:
                    attributes = ("author",)
                    relationships = {"author": ToOne(Person)}

    def test_bad_destination(self):
        class Broken(Model):
            class Meta:
                relationships = {"author": ToOne(Deferred(lambda: "people"))}

        with pytest.raises(InvalidDeclarationError):
            Broken.relationships["author"].destination


class TestModelRegistry:
    @pytest.fixture
    def target(self):
        return ModelRegistry

    def test_register(self, target):
        registry = target([Tag])
        assert registry.lookup("tags") is Tag
        assert "tags" in registry
        assert registry.lookup("people") is None

    def test_register_reachable(self, target):
        registry = target()
        registry.register_reachable(Article)
        assert registry.lookup("articles") is Article
        assert registry.lookup("people") is Person
        assert registry.lookup("comments") is Comment
        assert len(registry) == 3

    def test_register_reachable_self_reference(self, target):
        registry = target()
        registry.register_reachable(Node)
        assert len(registry) == 1

    def test_conflict(self, target):
        class OtherTag(Model):
            type_name = "tags"

        registry = target([Tag])
        registry.register(Tag)
        with pytest.raises(InvalidDeclarationError):
            registry.register(OtherTag)

    def test_no_type_name(self, target):
        class Anonymous(Model):
            pass

        with pytest.raises(InvalidDeclarationError):
            target([Anonymous])

    def test_register_reachable_by_name(self, target):
        registry = target([Owner])
        registry.register_reachable(Pet)
        assert len(registry) == 2
        assert Pet.relationships["owner"].destination_name == "owners"
        assert Pet.relationships["owner"].resolve_destination(registry) is Owner
        assert Owner.relationships["pets"].resolve_destination(registry) is Pet

    def test_register_reachable_unknown_name(self, target):
        with pytest.raises(InvalidDeclarationError):
            target().register_reachable(Pet)

    def test_name_without_registry(self):
        assert Article.relationships["author"].destination_name is None
        with pytest.raises(InvalidDeclarationError):
            Pet.relationships["owner"].destination
