"""
CRUD operations for graph nodes and relationships.

Nodes (Movie, Person, Genre, User) are addressed by their external ids;
relationship helpers take those ids and resolve the internal keys.
"""

from datetime import date, datetime
from typing import Dict, Iterable, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from graphrec.database.models import (
    ActedIn, Directed, Favorite, Genre, Movie, Person, Rated, User
)


def _finish(session: Session, obj, commit: bool):
    if commit:
        session.commit()
        session.refresh(obj)
    else:
        session.flush()
    return obj


# ==================== MOVIE OPERATIONS ====================

def create_movie(
    session: Session,
    tmdb_id: str,
    title: str,
    genres: Optional[Iterable[str]] = None,
    commit: bool = True,
    **properties
) -> Movie:
    """
    Create a movie node and its IN_GENRE edges.

    Args:
        session: Database session
        tmdb_id: External catalog id
        title: Movie title
        genres: Genre names; missing Genre nodes are created
        commit: Commit immediately (False only flushes, for bulk loads)
        **properties: Other Movie columns (year, released, budget, ...)

    Returns:
        Created Movie object
    """
    movie = Movie(tmdb_id=str(tmdb_id), title=title, **properties)
    session.add(movie)
    for name in genres or []:
        genre = get_or_create_genre(session, name, commit=False)
        if genre not in movie.genres:
            movie.genres.append(genre)
    return _finish(session, movie, commit)


def get_movie_count(session: Session) -> int:
    """Get total count of movies."""
    return session.query(func.count(Movie.id)).scalar()


# ==================== GENRE OPERATIONS ====================

def get_or_create_genre(session: Session, name: str, commit: bool = True) -> Genre:
    """Get a genre node by name, creating it if needed."""
    genre = session.query(Genre).filter(Genre.name == name).first()
    if genre is None:
        genre = Genre(name=name)
        session.add(genre)
        _finish(session, genre, commit)
    return genre


# ==================== PERSON OPERATIONS ====================

def create_person(
    session: Session,
    name: str,
    tmdb_id: Optional[str] = None,
    born: Optional[date] = None,
    commit: bool = True,
    **properties
) -> Person:
    """Create a person node."""
    person = Person(
        name=name,
        tmdb_id=str(tmdb_id) if tmdb_id is not None else None,
        born=born,
        **properties
    )
    session.add(person)
    return _finish(session, person, commit)


def add_acted_in(
    session: Session,
    person: Person,
    movie: Movie,
    role: Optional[str] = None,
    commit: bool = True
) -> ActedIn:
    """Add an ACTED_IN edge. Each role is a separate edge."""
    edge = ActedIn(person_pk=person.id, movie_pk=movie.id, role=role)
    session.add(edge)
    return _finish(session, edge, commit)


def add_directed(
    session: Session,
    person: Person,
    movie: Movie,
    commit: bool = True
) -> Directed:
    """Add a DIRECTED edge (idempotent)."""
    edge = session.query(Directed).filter(
        Directed.person_pk == person.id,
        Directed.movie_pk == movie.id
    ).first()
    if edge is None:
        edge = Directed(person_pk=person.id, movie_pk=movie.id)
        session.add(edge)
        _finish(session, edge, commit)
    return edge


# ==================== USER OPERATIONS ====================

def get_user(session: Session, user_id: str) -> Optional[User]:
    """Get a user by external id, or None if not found."""
    return session.query(User).filter(User.user_id == str(user_id)).first()


def get_or_create_user(
    session: Session,
    user_id: str,
    name: Optional[str] = None,
    commit: bool = True
) -> User:
    """Get a user node by external id, creating it if needed."""
    user = get_user(session, user_id)
    if user is None:
        user = User(user_id=str(user_id), name=name)
        session.add(user)
        _finish(session, user, commit)
    return user


def get_user_count(session: Session) -> int:
    """Get total count of users."""
    return session.query(func.count(User.id)).scalar()


# ==================== RATING OPERATIONS ====================

def rate_movie(
    session: Session,
    user: User,
    movie: Movie,
    rating: float,
    timestamp: Optional[datetime] = None,
    commit: bool = True
) -> Rated:
    """
    Add or update the RATED edge between a user and a movie.

    Raises:
        ValueError: If rating is negative
    """
    if rating < 0:
        raise ValueError("Rating must be non-negative")

    edge = session.query(Rated).filter(
        Rated.user_pk == user.id,
        Rated.movie_pk == movie.id
    ).first()
    if edge is None:
        edge = Rated(user_pk=user.id, movie_pk=movie.id, rating=float(rating), timestamp=timestamp)
        session.add(edge)
    else:
        edge.rating = float(rating)
        edge.timestamp = timestamp
    return _finish(session, edge, commit)


# ==================== FAVORITE OPERATIONS ====================

def add_favorite(session: Session, user: User, movie: Movie, commit: bool = True) -> Favorite:
    """Add a HAS_FAVORITE edge (idempotent)."""
    edge = session.query(Favorite).filter(
        Favorite.user_pk == user.id,
        Favorite.movie_pk == movie.id
    ).first()
    if edge is None:
        edge = Favorite(user_pk=user.id, movie_pk=movie.id)
        session.add(edge)
        _finish(session, edge, commit)
    return edge


def get_node_counts(session: Session) -> Dict[str, int]:
    """Count nodes per label."""
    return {
        'movies': get_movie_count(session),
        'people': session.query(func.count(Person.id)).scalar(),
        'genres': session.query(func.count(Genre.id)).scalar(),
        'users': get_user_count(session),
    }
