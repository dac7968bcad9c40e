"""Declared request schemas."""

from __future__ import annotations

from pydantic import EmailStr, Field

from buildvest.validation.schema import Number, RecordSchema


class BuilderRecord(RecordSchema):
    companyName: str
    type: str
    yearsActive: Number
    registeredAddress: str
    cin: str
    gst: str
    website: str
    contactPerson: str
    email: str
    phone: str
    regions: list[str]
    overview: str
    keyProjects: list[str]
    logo: str | None = None
    verified: bool | None = None
    rating: Number | None = None
    totalProjects: Number | None = None


class ProjectRecord(RecordSchema):
    title: str
    builderName: str
    # Free-text reference to a builder; never checked against `builders`.
    builderId: str | None = None
    city: str
    location: str
    stage: str
    priceRange: str
    expectedYield: str
    configurations: str
    area: str
    possession: str
    reraNumber: str
    type: str | None = None
    totalUnits: Number | None = None
    availableUnits: Number | None = None
    amenities: list[str] | None = None
    highlights: list[str] | None = None
    images: list[str] | None = None
    brochure: str | None = None
    featured: bool | None = None
    views: Number | None = None
    inquiries: Number | None = None


class RegistrationCredentials(RecordSchema):
    email: EmailStr
    password: str = Field(min_length=6)


class LoginCredentials(RecordSchema):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
