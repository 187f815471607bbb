"""Unit tests for the Python declaration source."""

import textwrap

import pytest

from synccheck.declarations.python_source import extract_models
from synccheck.declarations.type_forms import is_optional_type_text, marker_name
from synccheck.errors import DeclarationSourceError
from synccheck.schemas.declaration import MemberKind
from synccheck.services.validation_service import validate_source
from synccheck.schemas.validation import DiagnosticKind


SAMPLE_MODELS = textwrap.dedent(
    '''
    from typing import Annotated, ClassVar, Optional

    from sqlmodel import Field, Relationship, SQLModel


    class Job(SQLModel, table=True):
        name: str


    class SampleModel(SQLModel, table=True):
        """A model with one of everything."""

        __tablename__ = "samples"
        registry: ClassVar[dict] = {}

        requiredField: str = ""
        requiredField2: str
        optional: Optional[int]
        jobs: list["Job"] | None = Relationship(back_populates="sample")
        jobs2: list["Job"] = Relationship()
        owner: Annotated["Job", Relationship()]

        @property
        def label(self) -> str:
            return self.requiredField

        def rename(self, value: str) -> None:
            self.requiredField = value

        class Config:
            arbitrary_types_allowed = True


    class NotAModel:
        value: int
    '''
)


def _members(source: str, model: str):
    declarations = {d.model_name: d for d in extract_models(source, path="models.py")}
    return {m.binding_pattern: m for m in declarations[model].members}


# ═══════════════════════════════════════════════════════════
# Model discovery
# ═══════════════════════════════════════════════════════════


class TestModelDiscovery:
    def test_finds_models_in_source_order(self):
        names = [d.model_name for d in extract_models(SAMPLE_MODELS)]
        assert names == ["Job", "SampleModel"]

    def test_declaration_carries_location(self):
        decl = extract_models(SAMPLE_MODELS, path="models.py")[1]
        assert decl.source_path == "models.py"
        assert decl.line == 11

    def test_dataclass_decorator(self):
        source = textwrap.dedent(
            """
            from dataclasses import dataclass

            @dataclass(frozen=True)
            class Point:
                x: int = 0
            """
        )
        assert [d.model_name for d in extract_models(source)] == ["Point"]

    def test_subclass_of_local_model(self):
        source = textwrap.dedent(
            """
            from sqlmodel import Field, SQLModel

            class HeroBase(SQLModel):
                name: str = Field(index=True)

            class TimestampedHero(Hero):
                created: str

            class Hero(HeroBase, table=True):
                id: int | None = Field(default=None, primary_key=True)
                secret_name: str

            class Unrelated(object):
                value: int
            """
        )
        names = [d.model_name for d in extract_models(source)]
        assert names == ["HeroBase", "TimestampedHero", "Hero"]

        results = {decl.model_name: report for decl, report in validate_source(source)}
        assert results["Hero"].of_kind(DiagnosticKind.MISSING_DEFAULT_VALUE).affected_fields == (
            "secret_name",
        )

    def test_custom_bases(self):
        source = "class Thing(Document):\n    title: str\n"
        assert extract_models(source) == []
        found = extract_models(source, model_bases=["Document"], model_decorators=[])
        assert [d.model_name for d in found] == ["Thing"]

    def test_syntax_error(self):
        with pytest.raises(DeclarationSourceError) as excinfo:
            extract_models("class Broken(SQLModel:\n    x: int\n", path="bad.py")
        assert excinfo.value.path == "bad.py"
        assert str(excinfo.value).startswith("bad.py:")


# ═══════════════════════════════════════════════════════════
# Member records
# ═══════════════════════════════════════════════════════════


class TestMemberRecords:
    def test_member_kinds(self):
        members = _members(SAMPLE_MODELS, "SampleModel")
        assert members["requiredField"].kind == MemberKind.STORED_PROPERTY
        assert members["__tablename__"].kind == MemberKind.OTHER
        assert members["label"].kind == MemberKind.COMPUTED_PROPERTY
        assert members["rename"].kind == MemberKind.METHOD
        assert members["Config"].kind == MemberKind.NESTED_TYPE

    def test_classvar_is_not_stored(self):
        members = [
            m
            for m in extract_models(SAMPLE_MODELS)[1].members
            if m.kind == MemberKind.STORED_PROPERTY
        ]
        assert "registry" not in [m.binding_pattern for m in members]

    def test_quoted_classvar_is_not_stored(self):
        source = textwrap.dedent(
            """
            class Settings(SQLModel):
                registry: "ClassVar[dict]"
                name: str = ""
            """
        )
        members = _members(source, "Settings")
        assert members["name"].kind == MemberKind.STORED_PROPERTY
        assert [
            m for m in extract_models(source)[0].members if m.kind == MemberKind.STORED_PROPERTY
        ] == [members["name"]]

        [(_, report)] = validate_source(source)
        assert report.ok

    def test_initializer_presence(self):
        members = _members(SAMPLE_MODELS, "SampleModel")
        assert members["requiredField"].has_initializer is True
        assert members["requiredField2"].has_initializer is False

    def test_optional_annotations(self):
        members = _members(SAMPLE_MODELS, "SampleModel")
        assert members["optional"].type_annotation.is_optional is True
        assert members["jobs"].type_annotation.is_optional is True
        assert members["jobs2"].type_annotation.is_optional is False
        assert members["jobs"].type_annotation.text == "list['Job'] | None"

    def test_relationship_markers_collected(self):
        members = _members(SAMPLE_MODELS, "SampleModel")
        assert members["jobs"].attributes == ["Relationship"]
        assert members["owner"].attributes == ["Relationship"]
        assert members["requiredField"].attributes == []

    def test_positions(self):
        members = _members(SAMPLE_MODELS, "SampleModel")
        assert (members["requiredField2"].line, members["requiredField2"].column) == (18, 5)


# ═══════════════════════════════════════════════════════════
# Annotation forms
# ═══════════════════════════════════════════════════════════


class TestTypeForms:
    @pytest.mark.parametrize(
        "text",
        [
            "Optional[int]",
            "typing.Optional[int]",
            "Union[int, None]",
            "Union[None, int]",
            "int | None",
            "None | int",
            "str | int | None",
            "None",
            "'int | None'",
            "Mapped[Optional[int]]",
            "Mapped['Job | None']",
            "Annotated[int | None, Field(ge=0)]",
            "Mapped[Annotated[Optional[str], 'meta']]",
            "Union[Optional[int], str]",
            "int | Optional[str]",
            "Mapped['Union[Optional[Job], str]']",
        ],
    )
    def test_optional_forms(self, text):
        assert is_optional_type_text(text) is True

    @pytest.mark.parametrize(
        "text",
        ["int", "list[int | None]", "Union[int, str]", "Mapped[int]", "dict[str, None]", ""],
    )
    def test_required_forms(self, text):
        assert is_optional_type_text(text) is False

    def test_marker_name(self):
        assert marker_name("@Relationship(deleteRule: .cascade)") == "Relationship"
        assert marker_name("sqlalchemy.orm.relationship") == "relationship"


# ═══════════════════════════════════════════════════════════
# End to end
# ═══════════════════════════════════════════════════════════


class TestSourceValidation:
    def test_sample_model_report(self):
        results = dict(
            (decl.model_name, report) for decl, report in validate_source(SAMPLE_MODELS)
        )
        assert results["Job"].of_kind(DiagnosticKind.MISSING_DEFAULT_VALUE).affected_fields == (
            "name",
        )

        report = results["SampleModel"]
        assert report.of_kind(DiagnosticKind.MISSING_DEFAULT_VALUE).affected_fields == (
            "requiredField2",
        )
        assert report.of_kind(DiagnosticKind.NON_OPTIONAL_RELATIONSHIP).affected_fields == (
            "jobs2",
            "owner",
        )

    def test_sqlalchemy_declarative(self):
        source = textwrap.dedent(
            """
            from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

            class Base(DeclarativeBase):
                pass

            class Project(Base):
                __tablename__ = "projects"

                id: Mapped[int] = mapped_column(primary_key=True)
                description: Mapped[str | None]
                circuits: Mapped[list["Circuit"]] = relationship(back_populates="project")
            """
        )
        reports = {decl.model_name: report for decl, report in validate_source(source)}
        assert reports["Base"].ok
        project = reports["Project"]
        assert project.of_kind(DiagnosticKind.MISSING_DEFAULT_VALUE) is None
        assert project.of_kind(DiagnosticKind.NON_OPTIONAL_RELATIONSHIP).affected_fields == (
            "circuits",
        )
