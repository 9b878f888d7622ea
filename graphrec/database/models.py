"""
SQLAlchemy ORM models for the movie property graph.

The graph is stored as an adjacency structure: one table per node label
(Movie, Person, Genre, User) and one table per relationship type
(IN_GENRE, ACTED_IN, DIRECTED, RATED, HAS_FAVORITE).
"""

from datetime import date, datetime
from typing import List, Optional
from sqlalchemy import (
    BigInteger, Column, Date, Float, ForeignKey, Index, Integer, JSON,
    String, Table, Text, TIMESTAMP, CheckConstraint, UniqueConstraint
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


# IN_GENRE carries no properties, so it is a plain association table
in_genre = Table(
    'in_genre',
    Base.metadata,
    Column('movie_pk', Integer, ForeignKey('movies.id', ondelete='CASCADE'), primary_key=True),
    Column('genre_pk', Integer, ForeignKey('genres.id', ondelete='CASCADE'), primary_key=True),
    Index('idx_in_genre_genre', 'genre_pk'),
)


class Movie(Base):
    """
    Movie node.

    Attributes:
        id: Internal primary key (node identity)
        tmdb_id: Stable external catalog id, used as seed and candidate id
        movie_id: MovieLens id
        budget, revenue: Stored as big integers
        languages, countries: String arrays
    """
    __tablename__ = 'movies'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tmdb_id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    movie_id: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    imdb_id: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    plot: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    released: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    runtime: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    budget: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    revenue: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    imdb_rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    imdb_votes: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    poster: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    languages: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    countries: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)

    genres: Mapped[List["Genre"]] = relationship(
        "Genre",
        secondary=in_genre,
        back_populates="movies"
    )
    cast: Mapped[List["ActedIn"]] = relationship(
        "ActedIn",
        back_populates="movie",
        cascade="all, delete-orphan"
    )
    directors: Mapped[List["Directed"]] = relationship(
        "Directed",
        back_populates="movie",
        cascade="all, delete-orphan"
    )
    ratings: Mapped[List["Rated"]] = relationship(
        "Rated",
        back_populates="movie",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index('idx_movies_title', 'title'),
    )

    def __repr__(self) -> str:
        return f"<Movie(tmdb_id='{self.tmdb_id}', title='{self.title}')>"


class Person(Base):
    """Person node (actor and/or director)."""
    __tablename__ = 'people'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tmdb_id: Mapped[Optional[str]] = mapped_column(String(32), nullable=True, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    born: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    poster: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    acted_in: Mapped[List["ActedIn"]] = relationship("ActedIn", back_populates="person")
    directed: Mapped[List["Directed"]] = relationship("Directed", back_populates="person")

    __table_args__ = (
        Index('idx_people_name', 'name'),
    )

    def __repr__(self) -> str:
        return f"<Person(tmdb_id='{self.tmdb_id}', name='{self.name}')>"


class Genre(Base):
    """Genre node."""
    __tablename__ = 'genres'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    movies: Mapped[List["Movie"]] = relationship(
        "Movie",
        secondary=in_genre,
        back_populates="genres"
    )

    def __repr__(self) -> str:
        return f"<Genre(name='{self.name}')>"


class User(Base):
    """User node."""
    __tablename__ = 'users'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    ratings: Mapped[List["Rated"]] = relationship(
        "Rated",
        back_populates="user",
        cascade="all, delete-orphan"
    )
    favorites: Mapped[List["Favorite"]] = relationship(
        "Favorite",
        back_populates="user",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User(user_id='{self.user_id}', name='{self.name}')>"


class ActedIn(Base):
    """
    ACTED_IN edge. One row per role, so the same person may connect to
    the same movie more than once.
    """
    __tablename__ = 'acted_in'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    person_pk: Mapped[int] = mapped_column(
        Integer, ForeignKey('people.id', ondelete='CASCADE'), nullable=False
    )
    movie_pk: Mapped[int] = mapped_column(
        Integer, ForeignKey('movies.id', ondelete='CASCADE'), nullable=False
    )
    role: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    person: Mapped["Person"] = relationship("Person", back_populates="acted_in")
    movie: Mapped["Movie"] = relationship("Movie", back_populates="cast")

    __table_args__ = (
        Index('idx_acted_in_person', 'person_pk'),
        Index('idx_acted_in_movie', 'movie_pk'),
    )


class Directed(Base):
    """DIRECTED edge."""
    __tablename__ = 'directed'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    person_pk: Mapped[int] = mapped_column(
        Integer, ForeignKey('people.id', ondelete='CASCADE'), nullable=False
    )
    movie_pk: Mapped[int] = mapped_column(
        Integer, ForeignKey('movies.id', ondelete='CASCADE'), nullable=False
    )

    person: Mapped["Person"] = relationship("Person", back_populates="directed")
    movie: Mapped["Movie"] = relationship("Movie", back_populates="directors")

    __table_args__ = (
        UniqueConstraint('person_pk', 'movie_pk', name='unique_director_movie'),
        Index('idx_directed_movie', 'movie_pk'),
    )


class Rated(Base):
    """
    RATED edge between a user and a movie.

    Attributes:
        rating: Rating value (typically 1.0 to 5.0)
        timestamp: When the rating was given
    """
    __tablename__ = 'rated'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_pk: Mapped[int] = mapped_column(
        Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False
    )
    movie_pk: Mapped[int] = mapped_column(
        Integer, ForeignKey('movies.id', ondelete='CASCADE'), nullable=False
    )
    rating: Mapped[float] = mapped_column(Float, nullable=False)
    timestamp: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP, nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="ratings")
    movie: Mapped["Movie"] = relationship("Movie", back_populates="ratings")

    __table_args__ = (
        CheckConstraint("rating >= 0", name='check_rating_non_negative'),
        UniqueConstraint('user_pk', 'movie_pk', name='unique_user_movie_rating'),
        Index('idx_rated_user', 'user_pk'),
        Index('idx_rated_movie', 'movie_pk'),
    )

    def __repr__(self) -> str:
        return f"<Rated(user_pk={self.user_pk}, movie_pk={self.movie_pk}, rating={self.rating})>"


class Favorite(Base):
    """HAS_FAVORITE edge between a user and a movie."""
    __tablename__ = 'favorites'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_pk: Mapped[int] = mapped_column(
        Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False
    )
    movie_pk: Mapped[int] = mapped_column(
        Integer, ForeignKey('movies.id', ondelete='CASCADE'), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        server_default=func.current_timestamp()
    )

    user: Mapped["User"] = relationship("User", back_populates="favorites")
    movie: Mapped["Movie"] = relationship("Movie")

    __table_args__ = (
        UniqueConstraint('user_pk', 'movie_pk', name='unique_user_favorite'),
    )
